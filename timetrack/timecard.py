#!/usr/bin/env python3
"""
Main automation script for entering time events.
Handles login, navigation to the timesheet and creation of today's due events.
"""
import sys
import argparse
import dataclasses
import logging
from datetime import datetime
from typing import Optional

from timetrack.browser import BrowserController
from timetrack.config import load_config, validate_config_with_report
from timetrack.errors import AuthError, NavigationError
from timetrack.events import EventSink
from timetrack.models import AppConfig, RunSummary
from timetrack.play.pages.base_page import BasePage
from timetrack.play.pages.home_page import HomePage
from timetrack.play.pages.login_page import LoginPage, is_misrouted
from timetrack.play.pages.timesheet_page import TimesheetPage
from timetrack.schedule import ScheduleManager
from timetrack.totp import TOTPGenerator
from timetrack.utils import (
    get_screenshot_path,
    is_obfuscated,
    obfuscate_credential,
    setup_logging,
)

logger = logging.getLogger(__name__)


def correct_misrouting(browser: BrowserController, page: BasePage, url: str, events: EventSink) -> None:
    """Leave the company entry page by loading the configured URL once more. Best effort."""
    if not is_misrouted(page.current_url()):
        return
    events.warning("run.misrouted", "Detected companyEntry page, navigating to home with company parameter...")
    try:
        browser.navigate(url)
        page.wait_for_idle(3000)
        events.info("run.misrouted_fixed", "Successfully navigated to home page with company")
    except Exception as e:
        events.warning("run.misrouted_failed", f"Failed to navigate to home page, continuing anyway: {e}")


def capture_error_screenshot(page: Optional[BasePage], events: EventSink) -> Optional[str]:
    if page is None:
        return None
    try:
        return page.take_screenshot(get_screenshot_path("error"), full_page=True)
    except Exception as e:
        events.warning("run.screenshot_failed", f"Failed to take screenshot: {e}")
        return None


def clear_credentials(config: AppConfig) -> None:
    """Overwrite plaintext credentials once the browser session is over."""
    credentials = config.credentials
    for field in ("username", "password", "totp_secret"):
        value = getattr(credentials, field)
        if not is_obfuscated(value):
            setattr(credentials, field, obfuscate_credential(value))


def log_summary(summary: RunSummary, events: EventSink) -> None:
    failed = [r for r in summary.results if not r.success]
    if failed:
        events.warning(
            "run.failed_events",
            f"{len(failed)} event(s) failed to create",
            failed=[f"{r.kind.display_text}@{r.time}: {r.error}" for r in failed],
        )
    events.info("run.created", f"Successfully created {summary.successful}/{summary.total} time events")
    events.info(
        "run.summary",
        "EXECUTION SUMMARY",
        total=summary.total,
        successful=summary.successful,
        failed=summary.failed,
    )


def run_time_tracking(
    config: AppConfig,
    browser: BrowserController,
    schedule_manager: Optional[ScheduleManager] = None,
    totp_generator: Optional[TOTPGenerator] = None,
    events: Optional[EventSink] = None,
    now: Optional[datetime] = None,
) -> RunSummary:
    """
    Create today's due time events.

    The browser is only launched when at least one event is due, and it is
    closed exactly once whatever happens.

    Raises:
        AuthError: If authentication fails
        NavigationError: If the timesheet cannot be reached
    """
    events = events or EventSink(logger)
    schedule_manager = schedule_manager or ScheduleManager(config.schedules)

    schedule = schedule_manager.get_current_schedule(now)
    events.info(
        "run.schedule",
        f"Schedule determined: {schedule.day_type}",
        total_slots=len(schedule.slots),
        available_slots=len(schedule.available_slots),
    )

    if not schedule.available_slots:
        events.warning("run.nothing_due", "No time events available to create at this time")
        return RunSummary()

    totp_generator = totp_generator or TOTPGenerator(config.credentials.totp_secret)
    page = None
    try:
        events.info("run.browser", "Launching browser...")
        page = browser.launch()
        browser.navigate(config.url)
        page.wait_for_idle(3000)

        login_page = LoginPage(page, totp_generator, config.credentials, config.selectors, events)
        if login_page.is_required():
            events.info("run.auth", "Authentication required, starting authentication flow...")
            login_page.authenticate()
            correct_misrouting(browser, page, config.url, events)
        else:
            events.info("run.auth_skipped", "Authentication not required (already logged in)")

        home_page = HomePage(page, config.url, config.user_id, config.selectors, events)
        home_page.navigate_to_timesheet()
        events.info("run.timesheet", "Successfully navigated to timesheet page")

        timesheet_page = TimesheetPage(page, config.selectors, events)
        summary = RunSummary(timesheet_page.create_all_time_events(schedule.available_slots))
        log_summary(summary, events)
        return summary

    except (AuthError, NavigationError) as e:
        events.error("run.fatal", f"{type(e).__name__}: {e}")
        capture_error_screenshot(page, events)
        raise

    finally:
        try:
            events.info("run.browser_close", "Closing browser...")
            browser.close()
        except Exception as e:
            events.error("run.browser_close_failed", f"Error closing browser: {e}")
        clear_credentials(config)


def main():
    """Main execution function."""
    parser = argparse.ArgumentParser(description="Automate SuccessFactors clock-in/clock-out time events")
    parser.add_argument("--headless", action="store_true", help="Run browser in headless mode")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument("--config", type=str, help="Path to config.json configuration file")
    parser.add_argument("--log-file", type=str, help="Path to log file")
    parser.add_argument("--validate-config", action="store_true", help="Check configuration and exit")

    args = parser.parse_args()

    setup_logging(verbose=args.verbose, log_file=args.log_file)

    if args.validate_config:
        sys.exit(0 if validate_config_with_report(args.config) else 1)

    try:
        logger.info("Starting Time Tracking Automation")
        config = load_config(config_path=args.config)
        if args.headless:
            config.browser = dataclasses.replace(config.browser, headless=True)

        logger.info(f"Base URL: {config.url}")
        logger.info(f"Headless mode: {config.browser.headless}")

        browser = BrowserController(config.browser)
        summary = run_time_tracking(config, browser)

        if summary.exit_code:
            logger.error("Time tracking automation completed with errors - no events were created")
        else:
            logger.info("Time tracking automation completed successfully")
        sys.exit(summary.exit_code)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
