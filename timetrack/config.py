"""
Configuration management for time tracking automation.

Non-secret settings (target URL, selectors, schedules) live in config.json.
Credentials and machine-specific settings come from environment variables,
optionally loaded from a .env file.
"""
import os
import json
from pathlib import Path
from typing import List, Optional, Dict, Any
import logging

from dotenv import load_dotenv

from timetrack.models import (
    AppConfig,
    BrowserSettings,
    Credentials,
    Entry,
    EntryKind,
    SelectorSet,
)

load_dotenv()  # Load .env file if it exists

logger = logging.getLogger(__name__)

REQUIRED_ENV_VARS = {
    "SAP_USERNAME": "SAP username",
    "SAP_PASSWORD": "SAP password",
    "TOTP_SECRET": "TOTP secret",
    "SAP_USER_ID": "SAP user ID",
}


def get_config_path(config_path: Optional[str] = None) -> Path:
    """
    Resolve the config.json location.

    Order: explicit argument, TIMETRACK_CONFIG, ./config.json.
    """
    if config_path:
        return Path(config_path)
    env_path = os.getenv("TIMETRACK_CONFIG")
    if env_path:
        return Path(env_path)
    return Path.cwd() / "config.json"


def load_config_file(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Read and parse config.json.

    Raises:
        ValueError: If the file is missing or is not valid JSON
    """
    config_file = get_config_path(config_path)
    if not config_file.exists():
        raise ValueError(f"Configuration file not found: {config_file}")

    try:
        with open(config_file, 'r') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse {config_file}: {e}") from e

    logger.debug(f"Loaded configuration file {config_file}")
    return data


def normalize_time_slots(slots: List[Dict[str, str]]) -> List[Entry]:
    """Convert config file slots ({"time", "type"}) into Entry objects."""
    return [Entry(time=slot["time"], kind=EntryKind.parse(slot["type"])) for slot in slots]


def validate_environment_variables() -> None:
    """
    Validate required environment variables.

    Raises:
        ValueError: If any required variable is missing
    """
    missing = [name for name in REQUIRED_ENV_VARS if not os.getenv(name)]
    if missing:
        raise ValueError(
            f"Missing required environment variables: {', '.join(missing)}. "
            "Please check your .env file."
        )


def get_browser_settings(file_data: Optional[Dict[str, Any]] = None) -> BrowserSettings:
    browser_data = (file_data or {}).get("browser", {})
    return BrowserSettings(
        headless=os.getenv("HEADLESS", "true").lower() != "false",
        executable_path=os.getenv("CHROME_PATH") or None,
        default_timeout=int(browser_data.get("defaultTimeout", 30000)),
        slow_mo=int(os.getenv("TIMETRACK_SLOW_MO", "0")),
    )


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load and merge configuration from config.json and environment variables.

    Args:
        config_path: Path to config.json. If None, see get_config_path.

    Returns:
        Validated AppConfig

    Raises:
        ValueError: If configuration is invalid
    """
    validate_environment_variables()
    data = load_config_file(config_path)

    schedules = data.get("schedules") or {}
    config = AppConfig(
        url=data.get("url", ""),
        user_id=os.getenv("SAP_USER_ID"),
        credentials=Credentials(
            username=os.getenv("SAP_USERNAME", ""),
            password=os.getenv("SAP_PASSWORD", ""),
            totp_secret=os.getenv("TOTP_SECRET", ""),
        ),
        browser=get_browser_settings(data),
        selectors=SelectorSet.from_dict(data.get("selectors") or {}),
        schedules={
            "friday": normalize_time_slots(schedules.get("friday") or []),
            "regular": normalize_time_slots(schedules.get("regular") or []),
        },
    )

    validate_config(config)
    return config


def validate_config(config: AppConfig) -> bool:
    """
    Validate configuration structure.

    Returns:
        True if configuration is valid

    Raises:
        ValueError: If configuration is invalid
    """
    if not config.url:
        raise ValueError("Configuration error: url is required")

    credentials = config.credentials
    if not credentials.username or not credentials.password or not credentials.totp_secret:
        raise ValueError(
            "Configuration error: all credentials (username, password, totpSecret) are required"
        )

    for name in ("friday", "regular"):
        if not config.schedules.get(name):
            raise ValueError(f"Configuration error: {name} schedule cannot be empty")

    return True


def validate_config_with_report(config_path: Optional[str] = None) -> bool:
    """
    Validate configuration and log a detailed status report.

    Used by the --validate-config command.

    Returns:
        True if configuration is valid, False otherwise
    """
    errors = []
    warnings = []

    logger.info("Validating configuration...")

    for name, description in REQUIRED_ENV_VARS.items():
        value = os.getenv(name)
        if not value:
            errors.append(f"{name} not set ({description})")
        elif "your" in value.lower():
            warnings.append(f"{name} still has placeholder value")
        else:
            logger.info(f"{name} is set")

    chrome_path = os.getenv("CHROME_PATH")
    if chrome_path:
        if Path(chrome_path).exists():
            logger.info("Chrome executable found")
        else:
            errors.append(f"Chrome executable not found at: {chrome_path}")

    config_file = get_config_path(config_path)
    if not config_file.exists():
        errors.append(f"{config_file} not found")
    else:
        logger.info(f"{config_file} found")
        try:
            data = load_config_file(config_path)
            schedules = data.get("schedules") or {}
            if not schedules.get("friday") or not schedules.get("regular"):
                errors.append("config.json missing schedules configuration")
            else:
                normalize_time_slots(schedules["friday"])
                normalize_time_slots(schedules["regular"])
                logger.info("Schedules configured")
            SelectorSet.from_dict(data.get("selectors") or {})
            logger.info("Selectors configured")
        except (ValueError, KeyError) as e:
            errors.append(str(e))

    for warning in warnings:
        logger.warning(warning)

    if errors:
        for error in errors:
            logger.error(error)
        logger.error("Configuration validation failed!")
        return False

    logger.info("Configuration validation passed!")
    return True
