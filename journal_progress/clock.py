"""
Journal Progress Engine - Clock & Date Utilities
Calendar-day arithmetic in the user's local time, ignoring time-of-day.
"""

from datetime import datetime, date
from typing import Optional, Union
from zoneinfo import ZoneInfo


DateLike = Union[date, datetime, str]


def to_date(value: DateLike) -> date:
    """
    Normalize a date-like value to a calendar date.

    Args:
        value: A date, a datetime (time is dropped; aware values are first
            converted to local time) or an ISO string
            such as "2024-01-01" or "2024-01-01T21:30:00"

    Returns:
        The calendar date
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if len(text) > 10:
        return to_date(datetime.fromisoformat(text))
    return date.fromisoformat(text)


def today(tz: Optional[str] = None) -> date:
    """Current local calendar date, optionally in a named timezone."""
    if tz:
        return datetime.now(ZoneInfo(tz)).date()
    return date.today()


def day_distance(a: DateLike, b: DateLike) -> int:
    """
    Number of calendar days from `a` to `b`.

    Positive when `b` is after `a`, zero on the same day.
    """
    return (to_date(b) - to_date(a)).days


def is_weekend(value: DateLike) -> bool:
    return to_date(value).weekday() >= 5


def month_key(value: DateLike) -> str:
    """Sortable "YYYY-MM" key for the month a date falls in."""
    d = to_date(value)
    return f"{d.year:04d}-{d.month:02d}"
