"""Shared pytest fixtures."""
import pytest

from timetrack.events import RecordingEventSink
from timetrack.models import (
    AppConfig,
    BrowserSettings,
    Credentials,
    Entry,
    EntryKind,
    SelectorSet,
)
from timetrack.play.tests.fake_page import SELECTORS, FakePage, FakeTOTP


@pytest.fixture
def selectors() -> SelectorSet:
    return SelectorSet.from_dict(SELECTORS)


@pytest.fixture
def events() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()


@pytest.fixture
def totp() -> FakeTOTP:
    return FakeTOTP()


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(username="alice", password="s3cret", totp_secret="JBSWY3DPEHPK3PXP")


@pytest.fixture
def regular_entries():
    return [
        Entry("08:00", EntryKind.CLOCK_IN),
        Entry("14:00", EntryKind.CLOCK_OUT),
        Entry("15:00", EntryKind.CLOCK_IN),
        Entry("17:30", EntryKind.CLOCK_OUT),
    ]


@pytest.fixture
def app_config(selectors, credentials, regular_entries) -> AppConfig:
    return AppConfig(
        url="https://hcm.example.com/sf/home?company=ACME",
        user_id="u1001",
        credentials=credentials,
        browser=BrowserSettings(headless=True),
        selectors=selectors,
        schedules={
            "friday": [Entry("08:00", EntryKind.CLOCK_IN), Entry("15:00", EntryKind.CLOCK_OUT)],
            "regular": regular_entries,
        },
    )
