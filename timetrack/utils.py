"""
Utility functions for time tracking automation.
"""
import logging
import random
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from timetrack.models import EntryResult


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to log levels."""
    COLORS = {
        "DEBUG": "\033[94m",      # Blue
        "INFO": "\033[92m",       # Green
        "WARNING": "\033[93m",    # Yellow
        "ERROR": "\033[91m",      # Red
        "CRITICAL": "\033[91m",   # Red
        "RESET": "\033[0m",       # Reset to default color
    }

    def format(self, record):
        log_message = super().format(record)
        # Only add colors to console output, not file output
        if hasattr(record, 'no_color') and record.no_color:
            return log_message
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        return f"{color}{log_message}{self.COLORS['RESET']}"


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """
    Set up logging configuration with colored output.

    Args:
        verbose: If True, set log level to DEBUG
        log_file: Optional path to log file
    """
    log_level = logging.DEBUG if verbose else logging.INFO

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(ColoredFormatter(LOG_FORMAT))
    handlers = [stream_handler]

    # Create logs directory if logging to file
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.insert(0, file_handler)

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=handlers
    )


def format_time_for_input(time: str) -> str:
    """
    Convert an "HH:MM" time into the compact form the time input expects.

    The colon is removed and leading zeros are stripped from the whole digit
    string, so "08:00" becomes "800" and "00:05" becomes "5". Midnight would
    strip to an empty string and is entered as "0".
    """
    return time.replace(":", "", 1).lstrip("0") or "0"


def format_result_message(result: "EntryResult") -> str:
    """
    Format a time event result into a readable message.

    Args:
        result: The EntryResult object

    Returns:
        Formatted message string
    """
    status = "SUCCESS" if result.success else "FAILED"
    message = f"[{status}] {result.kind.display_text} at {result.time}"

    if result.error:
        message += f" (Error: {result.error})"

    return message


def obfuscate_credential(value: str) -> str:
    """
    Obfuscate a credential by overwriting with random-length null bytes.

    This prevents inferring the original credential length from a memory
    dump. Uses a random length between 8-64 characters.

    Args:
        value: The credential string to obfuscate

    Returns:
        String of null bytes with random length
    """
    random_length = random.randint(8, 64)
    return "\x00" * random_length


def is_obfuscated(value: Optional[str]) -> bool:
    """True when a credential has already been overwritten (or is empty)."""
    return not value or all(c == '\x00' for c in value)


def ensure_directory(path: str) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Path to the directory

    Returns:
        Path object for the directory
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def get_screenshot_path(suffix: str = "", directory: str = "screenshots") -> str:
    """
    Generate a timestamped screenshot path.

    Args:
        suffix: Optional suffix for the filename
        directory: Directory the screenshot goes into

    Returns:
        Path string for the screenshot
    """
    screenshots_dir = ensure_directory(directory)
    timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
    suffix_str = f"_{suffix}" if suffix else ""
    filename = f"timetrack{suffix_str}_{timestamp}.png"
    return str(screenshots_dir / filename)
