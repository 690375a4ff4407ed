"""
Interval overlap tests over half-open [start, end) minute ranges.
"""

from typing import Iterable, Optional, Protocol, TypeVar

from calendar_engine.utils.date_keys import DateKey
from calendar_engine.utils.time_math import to_minutes


class TimedItem(Protocol):
    """Anything placed on a date with a start and end time."""

    id: str
    date: DateKey
    start_time: str
    end_time: str


T = TypeVar("T", bound=TimedItem)


def overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """True if [a_start, a_end) and [b_start, b_end) intersect.

    Touching endpoints do not overlap.
    """
    return a_start < b_end and b_start < a_end


def instances_overlap(a: TimedItem, b: TimedItem) -> bool:
    """Time overlap of two items, ignoring their dates."""
    return overlaps(
        to_minutes(a.start_time),
        to_minutes(a.end_time),
        to_minutes(b.start_time),
        to_minutes(b.end_time),
    )


def find_conflicts(
    candidate: TimedItem,
    existing: Iterable[T],
    exclude_id: Optional[str] = None,
) -> list[T]:
    """Return the items on the candidate's date whose time range overlaps it."""
    skip_ids = {getattr(candidate, "id", None), exclude_id} - {None}
    return [
        item
        for item in existing
        if item.date == candidate.date
        and item.id not in skip_ids
        and instances_overlap(candidate, item)
    ]


def conflicts_with_any(
    candidate: TimedItem,
    existing: Iterable[TimedItem],
    exclude_id: Optional[str] = None,
) -> bool:
    """True iff any same-date item with a different id overlaps the candidate."""
    return bool(find_conflicts(candidate, existing, exclude_id))
