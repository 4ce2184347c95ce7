"""Offline tests for the page objects."""
