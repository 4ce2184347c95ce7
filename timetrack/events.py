"""
Structured event sink shared by the page objects and the run.

Components receive a sink instead of logging directly, so tests can assert
on what happened without capturing output. The default sink forwards every
event to the standard logging module.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class RunEvent:
    name: str
    message: str
    level: int = logging.INFO
    fields: Dict[str, Any] = field(default_factory=dict)


class EventSink:
    """Forwards events to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger("timetrack")

    def emit(self, name: str, message: str, level: int = logging.INFO, **fields: Any) -> RunEvent:
        event = RunEvent(name=name, message=message, level=level, fields=fields)
        if fields:
            details = ", ".join(f"{key}={value}" for key, value in fields.items())
            self.logger.log(level, f"{message} ({details})", extra={"event": name})
        else:
            self.logger.log(level, message, extra={"event": name})
        return event

    def info(self, name: str, message: str, **fields: Any) -> RunEvent:
        return self.emit(name, message, logging.INFO, **fields)

    def warning(self, name: str, message: str, **fields: Any) -> RunEvent:
        return self.emit(name, message, logging.WARNING, **fields)

    def error(self, name: str, message: str, **fields: Any) -> RunEvent:
        return self.emit(name, message, logging.ERROR, **fields)


class RecordingEventSink(EventSink):
    """Event sink that also keeps every event in memory."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        super().__init__(logger)
        self.events: List[RunEvent] = []

    def emit(self, name: str, message: str, level: int = logging.INFO, **fields: Any) -> RunEvent:
        event = super().emit(name, message, level, **fields)
        self.events.append(event)
        return event

    def names(self) -> List[str]:
        return [event.name for event in self.events]

    def find(self, name: str) -> List[RunEvent]:
        return [event for event in self.events if event.name == name]
