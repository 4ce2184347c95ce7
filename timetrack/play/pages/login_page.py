"""
Page Object Model for the SuccessFactors login flow.
Handles the username/password form and the one-time-code (TOTP) step.
"""
from enum import Enum
from typing import List, Optional, Tuple
import logging

from timetrack.errors import AuthError
from timetrack.events import EventSink
from timetrack.models import Credentials, SelectorSet
from timetrack.play.pages.base_page import BasePage
from timetrack.totp import TOTPGenerator

# URL fragments that only appear while the identity provider is in control
AUTH_URL_MARKERS = ("login", "auth", "keycloak")
# Intermediate company selection page reached when the code step was skipped
MISROUTED_URL_MARKER = "/companyEntry"

TOTP_FALLBACK_SELECTORS = (
    'input[name="totp"]',
    'input[type="text"][autocomplete="off"]',
)
TOTP_POLL_ATTEMPTS = 10
TOTP_POLL_INTERVAL = 1000


class AuthState(Enum):
    UNAUTHENTICATED = "unauthenticated"
    CREDENTIAL_PROMPT = "credential_prompt"
    CODE_PROMPT = "code_prompt"
    AUTHENTICATED = "authenticated"
    MISROUTED = "misrouted"


def is_misrouted(url: str) -> bool:
    return MISROUTED_URL_MARKER in url


def detect_auth_state(url: str, has_username_input: bool, has_code_input: bool) -> AuthState:
    """
    Derive the authentication state from what the page shows right now.

    Nothing is cached: callers observe the page again at every decision point.
    """
    if has_username_input:
        return AuthState.CREDENTIAL_PROMPT
    if has_code_input:
        return AuthState.CODE_PROMPT
    if any(marker in url for marker in AUTH_URL_MARKERS):
        return AuthState.UNAUTHENTICATED
    if is_misrouted(url):
        return AuthState.MISROUTED
    return AuthState.AUTHENTICATED


class LoginPage:
    """Represents the login and second-factor pages."""

    def __init__(
        self,
        page: BasePage,
        totp_generator: TOTPGenerator,
        credentials: Credentials,
        selectors: SelectorSet,
        events: Optional[EventSink] = None,
    ) -> None:
        if page is None:
            raise ValueError("Page instance is required")
        if totp_generator is None:
            raise ValueError("TOTP generator is required")
        self.page = page
        self.totp_generator = totp_generator
        self.credentials = credentials
        self.selectors = selectors
        self.events = events or EventSink(logging.getLogger(__name__))

    @property
    def totp_candidates(self) -> List[str]:
        """Configured code input selector first, then the generic fallbacks."""
        return [self.selectors.totp_input, *TOTP_FALLBACK_SELECTORS]

    def observe_state(self) -> AuthState:
        has_username = self.page.query_element(self.selectors.username_input) is not None
        has_code = self.page.query_element(self.selectors.totp_input) is not None
        return detect_auth_state(self.page.current_url(), has_username, has_code)

    def is_required(self) -> bool:
        """
        Check whether the current page asks for authentication.

        Probing errors are reported as "not required" so that an already
        authenticated session is not blocked by a flaky page; later steps
        surface the real problem.
        """
        try:
            self.page.wait_for_idle(2000)
            state = self.observe_state()
            if state is AuthState.CREDENTIAL_PROMPT:
                self.events.info("auth.required", "Authentication required: username input found")
                return True
            if state is AuthState.CODE_PROMPT:
                self.events.info("auth.required", "Authentication required: TOTP input found")
                return True
            if state is AuthState.UNAUTHENTICATED:
                self.events.info("auth.required", "Authentication required: on login page")
                return True
            self.events.info("auth.not_required", "Authentication not required - already logged in")
            return False
        except Exception as e:
            self.events.warning(
                "auth.probe_failed", f"Error checking authentication requirement: {e}"
            )
            return False

    def authenticate(self) -> None:
        """
        Run the login flow: credentials if asked for, then the one-time code.

        Raises:
            AuthError: If any step fails, or if the session lands on the
                company entry page without the code field ever appearing
        """
        try:
            self.events.info("auth.start", "Starting authentication process...")

            if self.page.query_element(self.selectors.username_input) is not None:
                self.events.info("auth.credentials", "Username/password login required")
                self.enter_credentials()
                self.events.info("auth.credentials_submit", "Submitting credentials...")
                navigated = self.page.expect_navigation(self.click_login_button, timeout=15000)
                if not navigated:
                    self.events.info("auth.navigation_timeout", "No navigation after login click, continuing")
                self.page.wait_for_idle(5000)
            else:
                self.events.info("auth.credentials_skipped", "Username/password already filled or not required")

            found = self.find_totp_input()
            if found is not None:
                working_selector, _ = found
                self.events.info("auth.totp", "TOTP authentication required", selector=working_selector)
                code = self.totp_generator.generate()
                self.enter_totp_code(code, working_selector)
                self.wait_for_authentication_complete()
                self.events.info("auth.complete", "Authentication completed successfully")
                return

            current_url = self.page.current_url()
        except Exception as e:
            raise AuthError(f"Authentication failed: {e}") from e

        self.events.warning(
            "auth.totp_missing",
            f"TOTP field not found after {TOTP_POLL_ATTEMPTS} attempts",
            url=current_url,
        )
        if is_misrouted(current_url):
            raise AuthError("misrouted after missing code field")
        self.events.info("auth.complete", "Authentication completed without a TOTP step")

    def enter_credentials(self) -> None:
        """Type username and password into the login form."""
        try:
            self.page.wait_for_element(self.selectors.username_input, timeout=10000)
            self.page.fill_text(self.selectors.username_input, self.credentials.username, delay=50)
            self.events.info("auth.username_entered", "Username entered")

            self.page.wait_for_element(self.selectors.password_input, timeout=10000)
            self.page.fill_text(self.selectors.password_input, self.credentials.password, delay=50)
            self.events.info("auth.password_entered", "Password entered")
        except Exception as e:
            raise AuthError(f"Failed to enter credentials: {e}") from e

    def click_login_button(self) -> None:
        try:
            self.page.wait_for_element(self.selectors.login_button, timeout=10000)
            self.page.click(self.selectors.login_button)
            self.page.wait_for_idle(1000)
        except Exception as e:
            raise AuthError(f"Failed to click login button: {e}") from e

    def find_totp_input(self) -> Optional[Tuple[str, object]]:
        """
        Poll for the code input over the candidate selectors.

        Returns:
            (working selector, element) for the first candidate found, or None
            once every attempt came back empty
        """
        for attempt in range(1, TOTP_POLL_ATTEMPTS + 1):
            for selector in self.totp_candidates:
                element = self.page.query_element(selector)
                if element is not None:
                    self.events.info("auth.totp_found", "TOTP field found", selector=selector, attempt=attempt)
                    return selector, element
            self.events.info(
                "auth.totp_poll",
                f"TOTP field not found yet, waiting... (attempt {attempt}/{TOTP_POLL_ATTEMPTS})",
            )
            self.page.wait_for_idle(TOTP_POLL_INTERVAL)
        return None

    def enter_totp_code(self, code: str, selector: str) -> None:
        try:
            self.page.wait_for_idle(500)
            self.page.fill_text(selector, code, delay=100)
            self.events.info("auth.totp_entered", "TOTP code entered", selector=selector)
        except Exception as e:
            raise AuthError(f"Failed to enter TOTP code: {e}") from e

    def submit_totp(self) -> None:
        # The code form is submitted with Enter, not with its button
        try:
            self.page.press_key("Enter")
            self.events.info("auth.totp_submitted", "TOTP authentication submitted")
        except Exception as e:
            raise AuthError(f"Failed to submit TOTP authentication: {e}") from e

    def wait_for_authentication_complete(self) -> None:
        """
        Submit the code and give the identity provider time to redirect back.

        A failed submit raises AuthError; failures while waiting are only logged.
        """
        try:
            settled = self.page.race_navigation(self.submit_totp, timeout=20000, deadline=8000)
            if not settled:
                self.events.info("auth.wait_finished", "Navigation wait completed without a settled redirect")
            self.page.wait_for_idle(3000)
        except AuthError:
            raise
        except Exception as e:
            self.events.info("auth.wait_finished", f"Navigation wait completed (timeout or error): {e}")

        final_url = self.page.current_url()
        self.events.info("auth.final_url", "Authentication process completed", url=final_url)
        if is_misrouted(final_url):
            self.events.warning(
                "auth.company_entry",
                "Redirected to company entry page. Company may not be properly set.",
            )
