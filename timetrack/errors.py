"""
Exception types raised by the time tracking automation.

AuthError and NavigationError abort a run. SelectionError stays local to a
single time event and ends up in that event's EntryResult.
"""
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from timetrack.models import EntryKind


class TimeTrackingError(Exception):
    """Base class for automation errors."""


class AuthError(TimeTrackingError):
    """Credential or one-time-code flow failed, or the session was misrouted."""


class NavigationError(TimeTrackingError):
    """Neither the UI path nor the direct URL reached the timesheet."""


class SelectionError(TimeTrackingError):
    """Every type selection strategy was exhausted for one time event."""

    def __init__(self, kind: "EntryKind"):
        self.kind = kind
        super().__init__(f"All strategies failed to select type: {kind.display_text}")


class GenerationError(TimeTrackingError):
    """A one-time code could not be produced."""
