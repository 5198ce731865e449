"""Shared utilities used across the booking core."""

import math
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

SECONDS_PER_DAY = 24 * 60 * 60


def is_known_timezone(name: str) -> bool:
    """Check whether an IANA zone name can be loaded."""
    if not name or not name.strip():
        return False
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to an aware UTC instant.

    Naive values are taken to already be UTC.

    Examples:
        >>> to_utc(datetime(2025, 3, 3, 9, 0)).isoformat()
        '2025-03-03T09:00:00+00:00'
    """
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def backend_weekday(day: date) -> int:
    """Weekday number with 0 = Sunday ... 6 = Saturday.

    Examples:
        >>> backend_weekday(date(2025, 3, 3))  # a Monday
        1
    """
    return (day.weekday() + 1) % 7


def rental_days(start: datetime, end: datetime) -> int:
    """Whole days billed for a rental: ceil((end - start) / 24h)."""
    seconds = (to_utc(end) - to_utc(start)).total_seconds()
    return math.ceil(seconds / SECONDS_PER_DAY)


def daterange(first: date, last: date):
    """Yield every date from first to last inclusive."""
    current = first
    while current <= last:
        yield current
        current += timedelta(days=1)


def unique(items) -> list:
    """Drop repeats while keeping first-seen order."""
    return list(dict.fromkeys(items))


def normalize_category(category: str) -> str:
    """Canonical form of an equipment category name."""
    return category.strip().lower()
