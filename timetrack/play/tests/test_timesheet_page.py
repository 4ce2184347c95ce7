"""
Tests for creating time events on the timesheet page.
"""
import pytest

from timetrack.play.tests.fake_page import TIMESHEET_ELEMENTS
from timetrack.models import Entry, EntryKind
from timetrack.play.pages.timesheet_page import TimesheetPage


@pytest.fixture
def timesheet(fake_page, selectors, events):
    fake_page.present.update(TIMESHEET_ELEMENTS)
    return TimesheetPage(fake_page, selectors, events)


def test_create_time_event(timesheet, fake_page):
    result = timesheet.create_time_event(Entry("08:00", EntryKind.CLOCK_IN))

    assert result.success is True
    assert result.error is None
    assert fake_page.targets("click") == ["#time-events", "#create", "#type", "#save"]
    assert ("fill", "#time", "800") in fake_page.calls
    assert ("fill", "#type", "Entrada") in fake_page.calls


def test_midnight_is_typed_as_zero(timesheet, fake_page):
    timesheet.create_time_event(Entry("00:00", EntryKind.CLOCK_OUT))
    assert ("fill", "#time", "0") in fake_page.calls


@pytest.mark.parametrize("failing, prefix", [
    ("#time-events", "Failed to click Time Events button:"),
    ("#create", "Failed to click Create button:"),
    ("#time", "Failed to fill time:"),
    ("#save", "Failed to submit event:"),
])
def test_stage_failure_is_captured(timesheet, fake_page, failing, prefix):
    fake_page.present.discard(failing)

    result = timesheet.create_time_event(Entry("14:45", EntryKind.CLOCK_OUT))

    assert result.success is False
    assert result.error.startswith(prefix)
    assert (result.time, result.kind) == ("14:45", EntryKind.CLOCK_OUT)


def test_selection_failure_is_captured(timesheet, fake_page):
    fake_page.fail("fill", "#type")

    result = timesheet.create_time_event(Entry("17:30", EntryKind.CLOCK_OUT))

    assert result.success is False
    assert result.error == "Failed to select type: All strategies failed to select type: Salida"
    assert "#save" not in fake_page.targets("click")


def test_create_all_keeps_order_and_isolates_failures(timesheet, fake_page, regular_entries):
    # Second entry cannot open the creation form
    fake_page.fail("wait", "#create", calls=[2])

    results = timesheet.create_all_time_events(regular_entries)

    assert [(r.time, r.kind) for r in results] == [(e.time, e.kind) for e in regular_entries]
    assert [r.success for r in results] == [True, False, True, True]
    assert results[1].error.startswith("Failed to click Create button:")


def test_create_all_pauses_between_entries(timesheet, fake_page):
    entries = [Entry("08:00", EntryKind.CLOCK_IN), Entry("14:00", EntryKind.CLOCK_OUT)]
    fake_page.fail("wait", "#create", calls=[2])

    timesheet.create_all_time_events(entries)

    # One submit settle for the first entry plus one pause before the second
    assert fake_page.idle_waits.count(2000) == 2


def test_create_all_survives_page_closing_mid_batch(timesheet, fake_page, events):
    entries = [
        Entry("08:00", EntryKind.CLOCK_IN),
        Entry("14:00", EntryKind.CLOCK_OUT),
        Entry("15:00", EntryKind.CLOCK_IN),
    ]

    def closed_after_first_submit(timeout=1000):
        if ("click", "#save") in fake_page.calls:
            raise RuntimeError("Target page, context or browser has been closed")
        fake_page.idle_waits.append(timeout)

    fake_page.wait_for_idle = closed_after_first_submit

    results = timesheet.create_all_time_events(entries)

    assert [r.time for r in results] == ["08:00", "14:00", "15:00"]
    assert [r.success for r in results] == [False, False, False]
    assert results[0].error.startswith("Failed to submit event:")
    assert len(events.find("entry.pause_failed")) == 2


def test_create_all_with_no_entries(timesheet, fake_page):
    assert timesheet.create_all_time_events([]) == []
    assert fake_page.calls == []
