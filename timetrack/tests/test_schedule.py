"""
Tests for picking today's schedule and its due entries.
"""
from datetime import datetime

from timetrack.models import Entry, EntryKind
from timetrack.schedule import FRIDAY, REGULAR, ScheduleManager

REGULAR_SLOTS = [
    Entry("08:00", EntryKind.CLOCK_IN),
    Entry("14:00", EntryKind.CLOCK_OUT),
    Entry("15:00", EntryKind.CLOCK_IN),
    Entry("17:30", EntryKind.CLOCK_OUT),
]
FRIDAY_SLOTS = [
    Entry("08:00", EntryKind.CLOCK_IN),
    Entry("15:00", EntryKind.CLOCK_OUT),
]


def manager():
    return ScheduleManager({FRIDAY: FRIDAY_SLOTS, REGULAR: REGULAR_SLOTS})


def test_friday_uses_friday_schedule():
    schedule = manager().get_current_schedule(datetime(2026, 10, 16, 16, 0))
    assert schedule.day_type == FRIDAY
    assert schedule.slots == FRIDAY_SLOTS
    assert schedule.available_slots == FRIDAY_SLOTS


def test_other_days_use_regular_schedule():
    schedule = manager().get_current_schedule(datetime(2026, 10, 17, 9, 0))
    assert schedule.day_type == REGULAR
    assert schedule.available_slots == REGULAR_SLOTS[:1]


def test_slot_at_current_minute_is_due():
    due = manager().get_current_schedule(datetime(2026, 10, 19, 14, 0, 59)).available_slots
    assert due == REGULAR_SLOTS[:2]


def test_nothing_due_before_first_slot():
    assert manager().get_current_schedule(datetime(2026, 10, 19, 7, 59)).available_slots == []
