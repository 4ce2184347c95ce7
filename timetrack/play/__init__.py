"""Playwright page objects for the timesheet automation."""
