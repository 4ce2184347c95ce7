"""
Schedule selection for the current day.

Two named schedules are configured: "friday" and "regular". Only the slots
whose time has already passed (or is exactly now) are due.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional

from timetrack.models import DaySchedule, Entry

logger = logging.getLogger(__name__)

FRIDAY = "friday"
REGULAR = "regular"


class ScheduleManager:
    """Picks today's schedule and filters it down to the due entries."""

    def __init__(self, schedules: Dict[str, List[Entry]]) -> None:
        self.friday_schedule = list(schedules[FRIDAY])
        self.regular_schedule = list(schedules[REGULAR])

    @staticmethod
    def filter_due_entries(slots: List[Entry], now: datetime) -> List[Entry]:
        """Keep the slots at or before the current minute, in their original order."""
        current = now.hour * 60 + now.minute
        return [slot for slot in slots if slot.minutes <= current]

    def get_current_schedule(self, now: Optional[datetime] = None) -> DaySchedule:
        now = now or datetime.now()
        # Monday is 0, Friday is 4
        is_friday = now.weekday() == 4
        slots = self.friday_schedule if is_friday else self.regular_schedule
        available = self.filter_due_entries(slots, now)
        day_type = FRIDAY if is_friday else REGULAR
        logger.debug(f"Schedule {day_type}: {len(available)}/{len(slots)} slots due at {now:%H:%M}")
        return DaySchedule(day_type=day_type, slots=slots, available_slots=available)
