"""Automated clock-in/clock-out entry for the SuccessFactors timesheet."""

__version__ = "1.0.0"
