"""Tests for the run, schedule and configuration."""
