"""Page Object Model classes for Playwright automation."""

from .base_page import BasePage
from .login_page import LoginPage
from .home_page import HomePage
from .timesheet_page import TimesheetPage

__all__ = [
    "BasePage",
    "LoginPage",
    "HomePage",
    "TimesheetPage",
]
