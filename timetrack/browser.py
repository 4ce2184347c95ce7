"""
Browser lifecycle for the automation: launch, initial navigation, close.
"""
import logging
from typing import Optional

from playwright.sync_api import Browser, BrowserContext, Playwright, sync_playwright

from timetrack.models import BrowserSettings
from timetrack.play.pages.base_page import BasePage

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
]


class BrowserController:
    """Owns the Playwright browser and the single page of a run."""

    def __init__(self, settings: BrowserSettings) -> None:
        self.settings = settings
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[BasePage] = None

    def launch(self) -> BasePage:
        """Start the browser and open the page every page object will share."""
        args = list(LAUNCH_ARGS)
        if not self.settings.headless:
            args.append("--start-maximized")

        try:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(
                headless=self.settings.headless,
                executable_path=self.settings.executable_path,
                slow_mo=self.settings.slow_mo,
                args=args,
            )
            # A null viewport lets a headed window use the full screen size
            viewport = {"width": 1920, "height": 1080} if self.settings.headless else None
            self._context = self._browser.new_context(
                viewport=viewport,
                no_viewport=not self.settings.headless,
                user_agent=USER_AGENT,
            )
            self._context.set_default_timeout(self.settings.default_timeout)
            self._context.set_default_navigation_timeout(self.settings.default_timeout)
            self._page = BasePage(self._context.new_page())
        except Exception as e:
            self.close()
            raise RuntimeError(f"Failed to launch browser: {e}") from e

        logger.info("Browser launched successfully")
        return self._page

    @property
    def page(self) -> BasePage:
        if self._page is None:
            raise RuntimeError("Browser not launched. Call launch() first.")
        return self._page

    def navigate(self, url: str) -> None:
        try:
            logger.info(f"Navigating to: {url}")
            self.page.goto(url, timeout=30000)
            logger.info("Navigation completed")
        except Exception as e:
            raise RuntimeError(f"Failed to navigate to {url}: {e}") from e

    def close(self) -> None:
        """Close the browser and stop Playwright. Safe to call more than once."""
        try:
            if self._context:
                self._context.close()
            if self._browser:
                self._browser.close()
        finally:
            if self._playwright:
                self._playwright.stop()
            self._playwright = None
            self._browser = None
            self._context = None
            self._page = None
