"""
Datetime utility functions.
"""

from datetime import datetime
from typing import Optional
import pytz


def utcnow() -> datetime:
    """
    Get current UTC datetime using pytz.UTC.

    Returns:
        Current UTC datetime with pytz timezone information
    """
    return datetime.now(pytz.UTC)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Attach UTC to naive datetimes and convert aware ones to UTC.

    Season and match timestamps come from different collaborators; some hand us
    naive values that are already UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return pytz.UTC.localize(value)
    return value.astimezone(pytz.UTC)


def format_display_date(value: Optional[datetime]) -> str:
    """
    Format a timestamp as DD.MM.YYYY for season and match labels.

    Examples:
        >>> format_display_date(datetime(2024, 3, 7))
        "07.03.2024"
    """
    if value is None:
        return ""
    return f"{value.day:02d}.{value.month:02d}.{value.year}"
