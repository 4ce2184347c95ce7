"""
Page Object Model for the SuccessFactors timesheet page.
Creates time events (clock in / clock out) one at a time.
"""
from typing import Callable, List, Optional
import logging

from timetrack.events import EventSink
from timetrack.models import Entry, EntryResult, SelectorSet
from timetrack.play.pages.base_page import BasePage
from timetrack.play.pages.type_selection import select_event_type
from timetrack.utils import format_result_message, format_time_for_input

INTER_ENTRY_PAUSE = 2000


class StageError(Exception):
    """One step of creating a time event failed."""


class TimesheetPage:
    """Represents the timesheet page with its Time Events section."""

    def __init__(self, page: BasePage, selectors: SelectorSet, events: Optional[EventSink] = None) -> None:
        self.page = page
        self.selectors = selectors
        self.events = events or EventSink(logging.getLogger(__name__))

    def _stage(self, description: str, action: Callable[[], None]) -> None:
        try:
            action()
        except Exception as e:
            raise StageError(f"Failed to {description}: {e}") from e

    def click_time_events_button(self) -> None:
        self.page.wait_for_element(self.selectors.time_events_button, timeout=10000)
        self.page.click(self.selectors.time_events_button)
        self.page.wait_for_idle(1500)

    def click_create_button(self) -> None:
        self.page.wait_for_element(self.selectors.create_button, timeout=10000)
        self.page.click(self.selectors.create_button)
        self.page.wait_for_idle(1500)

    def fill_time(self, time: str) -> None:
        self.page.wait_for_element(self.selectors.time_input, timeout=10000)
        formatted = format_time_for_input(time)
        self.events.info("entry.time", f"Converting time: {time} -> {formatted}")
        self.page.fill_text(self.selectors.time_input, formatted)
        self.page.wait_for_idle(500)

    def select_type(self, entry: Entry) -> None:
        select_event_type(self.page, self.selectors, entry.kind, self.events)
        self.page.wait_for_idle(500)

    def submit_event(self) -> None:
        self.page.wait_for_element(self.selectors.submit_button, timeout=10000)
        self.page.click(self.selectors.submit_button)
        self.events.info("entry.submitted", "Submitted event")
        self.page.wait_for_idle(2000)

    def create_time_event(self, entry: Entry) -> EntryResult:
        """
        Create one time event.

        Never raises: any failure is returned as an unsuccessful EntryResult.
        """
        try:
            self._stage("click Time Events button", self.click_time_events_button)
            self._stage("click Create button", self.click_create_button)
            self._stage("fill time", lambda: self.fill_time(entry.time))
            self._stage("select type", lambda: self.select_type(entry))
            self._stage("submit event", self.submit_event)
            return EntryResult.ok(entry)
        except Exception as e:
            return EntryResult.failed(entry, str(e))

    def create_all_time_events(self, entries: List[Entry]) -> List[EntryResult]:
        """Create every entry in order; one result per entry."""
        results = []
        self.events.info("entry.batch", f"Creating {len(entries)} time events...")

        for index, entry in enumerate(entries, start=1):
            if index > 1:
                try:
                    self.page.wait_for_idle(INTER_ENTRY_PAUSE)
                except Exception as e:
                    self.events.warning("entry.pause_failed", f"Pause between events failed: {e}")
            self.events.info(
                "entry.start",
                f"Creating event {index}/{len(entries)}: {entry.kind.display_text} at {entry.time}",
            )
            result = self.create_time_event(entry)
            results.append(result)
            if result.success:
                self.events.info("entry.success", format_result_message(result))
            else:
                self.events.error("entry.failed", format_result_message(result))

        return results
