"""
Calendar date helpers.

Dates are always local wall-clock dates built from year/month/day parts;
nothing here converts through UTC timestamps.
"""

import re
from datetime import date, datetime, timedelta, timezone
from typing import Iterator

# Local calendar date; serialized as "YYYY-MM-DD".
DateKey = date

_DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date_key(value: str) -> date:
    """
    Parse a "YYYY-MM-DD" string.

    Raises:
        ValueError: If the string is not a valid date key
    """
    if not isinstance(value, str) or not _DATE_KEY_RE.match(value):
        raise ValueError(f"Invalid date key: {value!r}")
    year, month, day = (int(part) for part in value.split("-"))
    return date(year, month, day)


def to_date_key(value: date) -> str:
    """Format a date as "YYYY-MM-DD" from its local components."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def local_today() -> date:
    """Today's date on the local wall clock."""
    return datetime.now().date()


def utc_now() -> datetime:
    """Current UTC time without tzinfo, the form record timestamps are stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end inclusive (nothing if start > end)."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def week_dates(reference: date, offset: int = 0) -> list[date]:
    """
    Return the seven dates of the Sunday-first week containing reference.

    Args:
        reference: Any date inside the wanted week
        offset: Whole weeks to move forward (positive) or back (negative)
    """
    # date.weekday(): Monday=0 ... Sunday=6
    days_since_sunday = (reference.weekday() + 1) % 7
    sunday = reference - timedelta(days=days_since_sunday) + timedelta(weeks=offset)
    return [sunday + timedelta(days=i) for i in range(7)]

