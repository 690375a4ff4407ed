"""
Time-of-day arithmetic.

Times of day travel through the engine as "HH:MM" strings and are converted
to integer minutes since midnight for arithmetic. There is no day rollover:
every result is clamped to 00:00-23:59.
"""

import math
import re

from calendar_engine.core.exceptions import InvalidTimeFormat

MINUTES_PER_DAY = 24 * 60
DAY_MIN = 0
DAY_MAX = MINUTES_PER_DAY - 1

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def to_minutes(time: str) -> int:
    """
    Parse an "HH:MM" string into minutes since midnight.

    A single-digit hour ("7:05") is accepted.

    Raises:
        InvalidTimeFormat: If the value is not a valid time of day
    """
    if not isinstance(time, str):
        raise InvalidTimeFormat(time)
    match = _TIME_RE.match(time.strip())
    if not match:
        raise InvalidTimeFormat(time)
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidTimeFormat(time)
    return hours * 60 + minutes


def clamp_minutes(value: int, lo: int = DAY_MIN, hi: int = DAY_MAX) -> int:
    """Bound a minute value to [lo, hi]."""
    return max(lo, min(value, hi))


def to_time_string(minutes: int) -> str:
    """Format minutes since midnight as "HH:MM", clamping to the day first."""
    minutes = clamp_minutes(int(minutes))
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def add_minutes(time: str, delta: int) -> str:
    """Shift a time by delta minutes, clamped to the same day."""
    return to_time_string(to_minutes(time) + delta)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up."""
    return int(math.floor(value + 0.5))


def snap_to_grid(minutes: int, grid_minutes: int = 15) -> int:
    """Round minutes to the nearest multiple of grid_minutes."""
    if grid_minutes <= 0:
        return int(minutes)
    return round_half_up(minutes / grid_minutes) * grid_minutes


def clamp_time(time: str, min_time: str, max_time: str) -> str:
    """Bound a time of day to [min_time, max_time]."""
    return to_time_string(
        clamp_minutes(to_minutes(time), to_minutes(min_time), to_minutes(max_time))
    )


def duration_minutes(start_time: str, end_time: str) -> int:
    """Minutes from start_time to end_time (negative if inverted)."""
    return to_minutes(end_time) - to_minutes(start_time)


def ensure_time_format(value: str | None, default: str = "09:00") -> str:
    """
    Normalize user-supplied time input to "HH:MM".

    Single-digit hours are zero-padded. Empty or malformed input is replaced
    by the default instead of raising.
    """
    if not value:
        return default
    try:
        return to_time_string(to_minutes(value))
    except InvalidTimeFormat:
        return default
