"""
Page Object Model for the SuccessFactors home page.
Reaches the timesheet through the Time Tracking tile, or directly by URL.
"""
from datetime import date
from typing import Optional
from urllib.parse import urlsplit
import logging

from timetrack.errors import NavigationError
from timetrack.events import EventSink
from timetrack.models import SelectorSet
from timetrack.play.pages.base_page import BasePage


def timesheet_url(base_url: str, user_id: str, today: Optional[date] = None) -> str:
    """
    Build the direct timesheet URL for a user and day.

    Only the scheme and host of base_url are kept.
    """
    today = today or date.today()
    parts = urlsplit(base_url)
    host = f"{parts.scheme}://{parts.netloc}" if parts.netloc else base_url.rstrip("/")
    return f"{host}/sf/timesheet#/timerecords/{user_id}/{today.isoformat()}"


class HomePage:
    """Represents the home page after login."""

    def __init__(
        self,
        page: BasePage,
        base_url: str,
        user_id: Optional[str],
        selectors: SelectorSet,
        events: Optional[EventSink] = None,
    ) -> None:
        self.page = page
        self.base_url = base_url
        self.user_id = user_id
        self.selectors = selectors
        self.events = events or EventSink(logging.getLogger(__name__))

    def open_timesheet_from_tile(self) -> None:
        """Click Time Tracking, then View Timesheet in the dialog that opens."""
        self.events.info("nav.ui", "Waiting for Time Tracking icon...")
        self.page.wait_for_element(self.selectors.time_tracking_icon, timeout=15000)
        self.page.click(self.selectors.time_tracking_icon)
        self.page.wait_for_idle(2000)

        self.events.info("nav.ui", "Waiting for View Timesheet link...")
        self.page.wait_for_element(self.selectors.view_timesheet_link, timeout=10000)
        self.page.click(self.selectors.view_timesheet_link)
        self.page.wait_for_idle(3000)

    def open_timesheet_by_url(self) -> None:
        if not self.user_id:
            raise NavigationError("User ID not configured for direct URL navigation")
        url = timesheet_url(self.base_url, self.user_id)
        self.events.info("nav.url", "Navigating directly to timesheet", url=url)
        self.page.goto(url, timeout=30000)
        self.page.wait_for_idle(3000)

    def navigate_to_timesheet(self) -> None:
        """
        Reach the timesheet page.

        The direct URL is only tried when the UI path fails.

        Raises:
            NavigationError: If both paths fail; the message names both errors
        """
        try:
            self.open_timesheet_from_tile()
            self.events.info("nav.ui_success", "UI navigation successful")
            return
        except Exception as ui_error:
            ui_message = str(ui_error)
            self.events.warning("nav.ui_failed", f"UI navigation failed: {ui_message}")

        try:
            self.open_timesheet_by_url()
            self.events.info("nav.url_success", "Direct URL navigation successful")
        except Exception as url_error:
            raise NavigationError(
                f"All navigation methods failed. UI: {ui_message}, URL: {url_error}"
            ) from url_error
