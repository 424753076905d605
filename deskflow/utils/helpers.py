"""
Helper Functions
================

Common utility functions used across the application.
"""

from datetime import date, datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Get current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)


def today() -> date:
    """Current UTC calendar date."""
    return utc_now().date()


def clean_optional(value: Optional[str]) -> Optional[str]:
    """Trim a free-text value, turning blank strings into None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def month_range(year: int, month: Optional[int] = None) -> tuple[date, date]:
    """
    First and last calendar day of a month, or of a whole year.

    Args:
        year: Four-digit year
        month: 1-12, or None for the whole year

    Returns:
        (start, end) both inclusive
    """
    if month is None:
        return date(year, 1, 1), date(year, 12, 31)

    start = date(year, month, 1)
    if month == 12:
        next_start = date(year + 1, 1, 1)
    else:
        next_start = date(year, month + 1, 1)
    return start, date.fromordinal(next_start.toordinal() - 1)
