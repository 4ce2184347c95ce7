"""
End-to-end tests of a run against the fake page and browser.
"""
from datetime import datetime

import pytest

from timetrack.errors import AuthError, NavigationError
from timetrack.play.tests.fake_page import TIMESHEET_ELEMENTS, FakeBrowser, FakePage
from timetrack.timecard import run_time_tracking
from timetrack.utils import is_obfuscated

# A Monday evening: every regular slot is due
MONDAY_EVENING = datetime(2026, 10, 19, 18, 0)
MONDAY_EARLY = datetime(2026, 10, 19, 7, 0)


@pytest.fixture
def ready_page():
    """Already logged in, timesheet reachable through the UI."""
    return FakePage(present=TIMESHEET_ELEMENTS)


def run(config, page, totp, events, now=MONDAY_EVENING):
    browser = FakeBrowser(page)
    summary = run_time_tracking(config, browser, totp_generator=totp, events=events, now=now)
    return browser, summary


def test_no_due_entries_does_nothing(app_config, fake_page, totp, events):
    browser, summary = run(app_config, fake_page, totp, events, now=MONDAY_EARLY)

    assert summary.total == 0
    assert summary.exit_code == 0
    assert browser.launched == 0
    assert browser.closed == 0
    assert fake_page.calls == []
    assert "run.nothing_due" in events.names()


def test_all_entries_created(app_config, ready_page, totp, events):
    browser, summary = run(app_config, ready_page, totp, events)

    assert [r.success for r in summary.results] == [True, True, True, True]
    assert (summary.successful, summary.total) == (4, 4)
    assert summary.exit_code == 0
    assert browser.navigations == [app_config.url]
    assert browser.closed == 1
    assert totp.generated == 0
    assert ready_page.targets("fill")[0::2] == ["#time"] * 4
    [created] = events.find("run.created")
    assert "4/4" in created.message
    [totals] = events.find("run.summary")
    assert totals.fields == {"total": 4, "successful": 4, "failed": 0}


def test_one_failed_submit_does_not_stop_the_run(app_config, ready_page, totp, events):
    ready_page.fail("wait", "#save", calls=[3])

    browser, summary = run(app_config, ready_page, totp, events)

    assert [r.success for r in summary.results] == [True, True, False, True]
    assert summary.results[2].error.startswith("Failed to submit event:")
    assert (summary.successful, summary.failed, summary.total) == (3, 1, 4)
    assert summary.exit_code == 0
    [created] = events.find("run.created")
    assert "3/4" in created.message
    [totals] = events.find("run.summary")
    assert totals.fields == {"total": 4, "successful": 3, "failed": 1}


def test_exit_code_when_nothing_succeeds(app_config, ready_page, totp, events):
    ready_page.present.discard("#save")

    browser, summary = run(app_config, ready_page, totp, events)

    assert summary.successful == 0
    assert summary.exit_code == 1
    assert browser.closed == 1


def test_entries_follow_schedule_order(app_config, ready_page, totp, events, regular_entries):
    _, summary = run(app_config, ready_page, totp, events)
    assert [(r.time, r.kind) for r in summary.results] == [(e.time, e.kind) for e in regular_entries]


def test_login_then_create(app_config, ready_page, totp, events):
    ready_page.url = "https://idp.example.com/auth/realms/acme/login"
    ready_page.present.update({"#username", "#password", "#kc-login", "#otp"})

    def leave_login_form(page):
        page.present.difference_update({"#username", "#otp"})
        page.url = "https://hcm.example.com/sf/home"

    ready_page.on("press", "Enter", leave_login_form)
    browser = FakeBrowser(ready_page)
    # The initial navigation lands on the identity provider
    browser.navigate = lambda url: browser.navigations.append(url)

    summary = run_time_tracking(app_config, browser, totp_generator=totp, events=events, now=MONDAY_EVENING)

    assert totp.generated == 1
    assert summary.successful == 4
    assert browser.navigations == [app_config.url]


def test_misrouted_session_is_sent_home_once(app_config, ready_page, totp, events):
    ready_page.present.add("#otp")
    ready_page.on("press", "Enter", lambda page: setattr(page, "url", "https://hcm.example.com/sf/companyEntry"))

    browser, summary = run(app_config, ready_page, totp, events)

    assert browser.navigations == [app_config.url, app_config.url]
    assert "run.misrouted" in events.names()
    assert summary.successful == 4


def test_auth_failure_aborts_run(app_config, ready_page, totp, events):
    ready_page.present.update({"#username", "#password"})

    browser = FakeBrowser(ready_page)
    with pytest.raises(AuthError, match="Failed to click login button"):
        run_time_tracking(app_config, browser, totp_generator=totp, events=events, now=MONDAY_EVENING)

    assert browser.closed == 1
    assert ready_page.targets("click") == []
    assert len(ready_page.screenshots) == 1
    assert "run.fatal" in events.names()


def test_navigation_failure_aborts_run(app_config, fake_page, totp, events):
    fake_page.fail("goto", None, RuntimeError("net::ERR_CONNECTION_RESET"))

    browser = FakeBrowser(fake_page)
    with pytest.raises(NavigationError) as excinfo:
        run_time_tracking(app_config, browser, totp_generator=totp, events=events, now=MONDAY_EVENING)

    assert "UI:" in str(excinfo.value)
    assert "net::ERR_CONNECTION_RESET" in str(excinfo.value)
    assert browser.closed == 1
    assert fake_page.ops("fill") == []


def test_credentials_are_scrubbed_after_run(app_config, ready_page, totp, events):
    run(app_config, ready_page, totp, events)

    credentials = app_config.credentials
    assert is_obfuscated(credentials.username)
    assert is_obfuscated(credentials.password)
    assert is_obfuscated(credentials.totp_secret)


def test_browser_close_error_is_logged(app_config, ready_page, totp, events):
    browser = FakeBrowser(ready_page)

    def broken_close():
        raise RuntimeError("browser already gone")

    browser.close = broken_close

    summary = run_time_tracking(app_config, browser, totp_generator=totp, events=events, now=MONDAY_EVENING)

    assert summary.successful == 4
    assert "run.browser_close_failed" in events.names()
