"""
Settings service for runtime configuration.

Reads environment variables (optionally from a .env file) and falls back to the
defaults in utils.constants.
"""

import os
import locale
import logging
from dotenv import load_dotenv
from scoreboard.utils.constants import POSITION_HISTOGRAM_SIZE, STATS_DISPLAY_DECIMALS

# Load environment variables
load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def get_bool_env(key: str, default: bool = True) -> bool:
    """
    Parse a boolean environment variable from a string value.

    Args:
        key: Environment variable name
        default: Default value if the variable is not set

    Returns:
        bool: Parsed boolean value
    """
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes")


def get_int_env(key: str, default: int, minimum: int = 0) -> int:
    """
    Parse an integer environment variable, falling back to the default when the
    value is missing, malformed, or below the minimum.
    """
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"Ignoring non-integer {key}={value!r}, using {default}")
        return default
    if parsed < minimum:
        logger.warning(f"Ignoring {key}={parsed} (minimum {minimum}), using {default}")
        return default
    return parsed


def get_log_level() -> int:
    """Numeric log level from LOG_LEVEL (default INFO)."""
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    return getattr(logging, log_level, logging.INFO)


def get_position_histogram_size() -> int:
    """Highest position bucketed in detailed player stats."""
    return get_int_env("POSITION_HISTOGRAM_SIZE", POSITION_HISTOGRAM_SIZE, minimum=1)


def get_stats_display_decimals() -> int:
    """Decimal places for displayed averages."""
    return get_int_env("STATS_DISPLAY_DECIMALS", STATS_DISPLAY_DECIMALS)


def should_log_clamped_rollbacks() -> bool:
    """Whether clamped stat rollbacks are reported as warnings."""
    return get_bool_env("LOG_CLAMPED_ROLLBACKS", True)


def configure_logging(level=None) -> None:
    """
    Set up root logging for processes embedding the engine.

    Args:
        level: Optional numeric level; defaults to LOG_LEVEL from the environment
    """
    logging.basicConfig(
        level=level if level is not None else get_log_level(),
        format=LOG_FORMAT,
    )


def get_collate_locale() -> str:
    """Locale used to order player names, from COLLATE_LOCALE (empty keeps the process locale)."""
    return os.getenv("COLLATE_LOCALE", "").strip()


def configure_locale(name=None) -> bool:
    """
    Apply the name collation locale to LC_COLLATE.

    Args:
        name: Optional locale name (e.g. "ru_RU.UTF-8"); defaults to COLLATE_LOCALE

    Returns:
        bool: True if a locale was applied
    """
    name = name if name is not None else get_collate_locale()
    if not name:
        return False
    try:
        locale.setlocale(locale.LC_COLLATE, name)
    except locale.Error as e:
        logger.warning(f"Could not set collation locale {name!r}: {e}")
        return False
    logger.info(f"Name collation locale set to {name}")
    return True
