#!/usr/bin/env python3
"""
Startup script for running the time tracking automation.
Intended for cron or a scheduled job: `python run.py --headless`.
"""
from timetrack.timecard import main

if __name__ == "__main__":
    main()
