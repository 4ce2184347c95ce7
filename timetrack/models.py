"""
Data models for the time tracking automation workflow.

These are dataclass models passed between the schedule, the page objects
and the run summary. Credentials are held in plaintext only for the
duration of a run and are scrubbed afterwards (see utils.obfuscate_credential).
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

TIME_PATTERN = re.compile(r"^\d{2}:\d{2}$")


class EntryKind(Enum):
    """Type of time event, valued with the label the timesheet UI shows."""
    CLOCK_IN = "Entrada"
    CLOCK_OUT = "Salida"

    @property
    def display_text(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: str) -> "EntryKind":
        """
        Parse a configured event type.

        Accepts the UI labels ("Entrada", "Salida") as well as the member
        names ("clock_in", "clock_out"), case-insensitively.
        """
        if isinstance(raw, cls):
            return raw
        text = str(raw).strip().lower()
        for kind in cls:
            if text in (kind.value.lower(), kind.name.lower()):
                return kind
        raise ValueError(f"Invalid event type: {raw}. Must be 'Entrada' or 'Salida'")


@dataclass(frozen=True)
class Entry:
    """One scheduled clock-in/clock-out action at a wall-clock time."""
    time: str
    kind: EntryKind

    def __post_init__(self):
        if not isinstance(self.time, str) or not TIME_PATTERN.match(self.time):
            raise ValueError(f"Invalid entry time '{self.time}', expected HH:MM")

    @property
    def minutes(self) -> int:
        hour, minute = self.time.split(":")
        return int(hour) * 60 + int(minute)


@dataclass(frozen=True)
class EntryResult:
    """Outcome of creating one time event."""
    time: str
    kind: EntryKind
    success: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls, entry: Entry) -> "EntryResult":
        return cls(time=entry.time, kind=entry.kind, success=True)

    @classmethod
    def failed(cls, entry: Entry, error: str) -> "EntryResult":
        return cls(time=entry.time, kind=entry.kind, success=False, error=error)


@dataclass(frozen=True)
class SelectorSet:
    """
    CSS selectors for the page elements the automation touches.

    The values come from config.json and are treated as opaque; any of them
    may be stale, so the page objects fall back rather than trust them.
    """
    username_input: str
    password_input: str
    login_button: str
    totp_input: str
    time_tracking_icon: str
    view_timesheet_link: str
    date_selector: str
    time_events_button: str
    create_button: str
    time_input: str
    type_dropdown: str
    submit_button: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SelectorSet":
        """Build from a mapping using either snake_case or camelCase keys."""
        values = {}
        missing = []
        for name in cls.__dataclass_fields__:
            camel = _to_camel(name)
            value = data.get(name, data.get(camel))
            if not value:
                missing.append(camel)
            values[name] = value
        if missing:
            raise ValueError(f"Configuration error: selector(s) required: {', '.join(missing)}")
        return cls(**values)


def _to_camel(name: str) -> str:
    head, *tail = name.split("_")
    return head + "".join(part.title() for part in tail)


@dataclass
class Credentials:
    """
    Login credentials for the target application.

    Mutable on purpose: the run overwrites the plaintext values once the
    browser session is closed.
    """
    username: str
    password: str
    totp_secret: str


@dataclass(frozen=True)
class BrowserSettings:
    headless: bool = True
    executable_path: Optional[str] = None
    default_timeout: int = 30000
    slow_mo: int = 0


@dataclass
class AppConfig:
    """Complete application configuration."""
    url: str
    user_id: Optional[str]
    credentials: Credentials
    browser: BrowserSettings
    selectors: SelectorSet
    schedules: Dict[str, List[Entry]]


@dataclass(frozen=True)
class DaySchedule:
    """Schedule selected for today and the subset already due."""
    day_type: str
    slots: List[Entry]
    available_slots: List[Entry]


@dataclass
class RunSummary:
    """Aggregated outcome of one automation run."""
    results: List[EntryResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return self.total - self.successful

    @property
    def exit_code(self) -> int:
        """Non-zero only when entries were attempted and none succeeded."""
        if self.total > 0 and self.successful == 0:
            return 1
        return 0
