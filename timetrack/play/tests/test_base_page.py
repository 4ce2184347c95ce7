"""
Tests for the navigation helpers of BasePage, driven by a mocked Playwright page.
"""
from unittest.mock import MagicMock

import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from timetrack.play.pages.base_page import BasePage


@pytest.fixture
def playwright_page():
    return MagicMock()


@pytest.fixture
def base_page(playwright_page):
    return BasePage(playwright_page)


def navigation_window(playwright_page):
    return playwright_page.expect_navigation.return_value


def test_expect_navigation_settled(base_page, playwright_page):
    action = MagicMock()

    assert base_page.expect_navigation(action, timeout=15000) is True

    action.assert_called_once_with()
    playwright_page.expect_navigation.assert_called_once_with(wait_until="networkidle", timeout=15000)


def test_expect_navigation_timeout_after_action_is_tolerated(base_page, playwright_page):
    navigation_window(playwright_page).__exit__.side_effect = PlaywrightTimeoutError("Timeout 15000ms exceeded.")
    action = MagicMock()

    assert base_page.expect_navigation(action) is False
    action.assert_called_once_with()


def test_expect_navigation_action_failure_propagates(base_page):
    def click_fails():
        raise PlaywrightTimeoutError("Timeout 10000ms exceeded waiting for #kc-login")

    with pytest.raises(PlaywrightTimeoutError, match="#kc-login"):
        base_page.expect_navigation(click_fails)


def test_race_navigation_opens_window_before_action(base_page, playwright_page):
    window = navigation_window(playwright_page)

    def press_enter():
        # The redirect may start immediately, so the window must already be open
        assert window.__enter__.called
        playwright_page.keyboard.press("Enter")

    assert base_page.race_navigation(press_enter, timeout=20000, deadline=8000) is True

    playwright_page.expect_navigation.assert_called_once_with(wait_until="networkidle", timeout=8000)
    playwright_page.keyboard.press.assert_called_once_with("Enter")
    playwright_page.wait_for_load_state.assert_not_called()


def test_race_navigation_uses_earlier_limit(base_page, playwright_page):
    base_page.race_navigation(MagicMock(), timeout=5000, deadline=8000)

    playwright_page.expect_navigation.assert_called_once_with(wait_until="networkidle", timeout=5000)


def test_race_navigation_deadline_reached(base_page, playwright_page):
    navigation_window(playwright_page).__exit__.side_effect = PlaywrightTimeoutError("Timeout 8000ms exceeded.")

    assert base_page.race_navigation(MagicMock()) is False


def test_race_navigation_wait_error_is_reported_not_raised(base_page, playwright_page):
    navigation_window(playwright_page).__exit__.side_effect = PlaywrightError(
        "Target page, context or browser has been closed"
    )

    assert base_page.race_navigation(MagicMock()) is False


def test_race_navigation_action_failure_propagates(base_page):
    def press_fails():
        raise PlaywrightError("Target page, context or browser has been closed")

    with pytest.raises(PlaywrightError, match="has been closed"):
        base_page.race_navigation(press_fails)
