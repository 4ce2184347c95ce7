"""
Page object model for the base page.
Wraps the single Playwright page handle shared by every page object in a run.
"""
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional, Union
import logging

from playwright.sync_api import ElementHandle, Locator, Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

logger = logging.getLogger(__name__)

Target = Union[str, Locator, ElementHandle]


class BasePage:
    """Represents the page/session handle the automation drives."""

    def __init__(self, page: Page) -> None:
        self.page = page

    def current_url(self) -> str:
        return self.page.url

    def _locator(self, selector: Union[str, Locator]) -> Locator:
        if isinstance(selector, str):
            return self.page.locator(selector).first
        return selector

    def take_screenshot(self, filename: Optional[str] = None, full_page: bool = False) -> str:
        """
        Take a screenshot of the current page.

        Args:
            filename: Optional filename for the screenshot. If not provided, generates a timestamped name.
            full_page: If True, captures the full scrollable page

        Returns:
            Path to the saved screenshot
        """
        if filename is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"screenshot_{timestamp}.png"

        # Ensure filename has .png extension
        if not filename.endswith('.png'):
            filename = f"{filename}.png"

        screenshot_path = Path(filename)
        if screenshot_path.parent == Path("."):
            screenshot_path = Path("screenshots") / filename
        screenshot_path.parent.mkdir(parents=True, exist_ok=True)

        self.page.screenshot(path=str(screenshot_path), full_page=full_page)
        logger.info(f"Screenshot saved to {screenshot_path}")
        return str(screenshot_path)

    def wait_for_element(
        self,
        selector: Union[str, Locator],
        state: str = "visible",
        timeout: int = 10000
    ) -> Locator:
        """
        Wait for an element to reach a specific state.

        Args:
            selector: A CSS selector or a Locator
            state: The state to wait for - "visible", "attached", "detached", "hidden" (default: "visible")
            timeout: Maximum time to wait in milliseconds (default: 10000)

        Returns:
            The Locator that was waited for (useful for chaining)

        Raises:
            TimeoutError: If element doesn't reach the state within timeout
        """
        locator = self._locator(selector)
        locator.wait_for(state=state, timeout=timeout)
        return locator

    def query_element(self, selector: str) -> Optional[ElementHandle]:
        """Return the first element matching selector, or None. Does not wait."""
        return self.page.query_selector(selector)

    def click(self, target: Target, click_count: int = 1) -> None:
        """Click a selector, locator or an element handle returned by query_element."""
        if isinstance(target, ElementHandle):
            target.click(click_count=click_count)
        else:
            self._locator(target).click(click_count=click_count)

    def fill_text(self, selector: str, text: str, delay: int = 0) -> None:
        """
        Clear a field and type text into it key by key.

        Typing (rather than filling) fires the key events the UI5 inputs
        listen to.
        """
        locator = self._locator(selector)
        locator.click(click_count=3)
        locator.fill("")
        locator.press_sequentially(text, delay=delay)

    def press_key(self, key: str) -> None:
        self.page.keyboard.press(key)

    def evaluate(self, expression: str, arg: Any = None) -> Any:
        return self.page.evaluate(expression, arg)

    def goto(self, url: str, timeout: int = 30000) -> None:
        self.page.goto(url, wait_until="networkidle", timeout=timeout)

    def expect_navigation(self, action: Callable[[], None], timeout: int = 15000) -> bool:
        """
        Run an action while waiting for the navigation it triggers.

        A navigation timeout is tolerated and reported as False. Errors raised
        by the action itself propagate.
        """
        action_done = False
        try:
            with self.page.expect_navigation(wait_until="networkidle", timeout=timeout):
                action()
                action_done = True
        except PlaywrightTimeoutError:
            if not action_done:
                raise
            logger.debug(f"No navigation settled within {timeout}ms")
            return False
        return True

    def race_navigation(
        self,
        action: Callable[[], None],
        timeout: int = 20000,
        deadline: int = 8000
    ) -> bool:
        """
        Run an action, then wait for the navigation it triggers to settle or
        for a fixed deadline, whichever comes first.

        The navigation window is opened before the action so a redirect that
        happens straight away is not missed. Errors raised by the action
        propagate; any failure of the wait itself is reported as False.
        """
        action_done = False
        try:
            with self.page.expect_navigation(wait_until="networkidle", timeout=min(timeout, deadline)):
                action()
                action_done = True
        except Exception as e:
            if not action_done:
                raise
            logger.debug(f"Navigation did not settle within {min(timeout, deadline)}ms: {e}")
            return False
        return True

    def wait_for_idle(self, timeout: int = 1000) -> None:
        """
        Wait a short moment for any immediate actions to complete.

        This is a simple timeout to allow any immediate UI updates or
        navigation to start after an action. Does not wait for network idle.

        Args:
            timeout: Time to wait in milliseconds (default: 1000)
        """
        self.page.wait_for_timeout(timeout)
