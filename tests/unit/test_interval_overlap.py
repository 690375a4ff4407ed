"""
Unit tests for interval overlap and conflict detection.
"""

from datetime import date

from calendar_engine.models.instance import EventInstance
from calendar_engine.services.interval_overlap import (
    conflicts_with_any,
    find_conflicts,
    overlaps,
)

DAY = date(2024, 4, 1)


def _event(event_id: str, start: str, end: str, on: date = DAY) -> EventInstance:
    return EventInstance(id=event_id, title=event_id, date=on, start_time=start, end_time=end)


class TestOverlaps:
    def test_half_open_ranges(self):
        assert overlaps(540, 600, 570, 630)
        assert not overlaps(540, 600, 600, 660)
        assert overlaps(540, 660, 570, 600)

    def test_symmetric(self):
        ranges = [(0, 30), (15, 45), (30, 60), (50, 55), (60, 90)]
        for a in ranges:
            for b in ranges:
                assert overlaps(*a, *b) == overlaps(*b, *a)


class TestFindConflicts:
    def test_same_date_overlap_only(self):
        existing = [
            _event("a", "09:00", "10:00"),
            _event("b", "10:00", "11:00"),
            _event("c", "09:30", "09:45", on=date(2024, 4, 2)),
        ]
        candidate = _event("new", "09:30", "10:15")

        conflicts = find_conflicts(candidate, existing)

        assert [item.id for item in conflicts] == ["a", "b"]

    def test_skips_candidate_itself_and_excluded_id(self):
        existing = [_event("a", "09:00", "10:00"), _event("b", "09:00", "10:00")]
        candidate = _event("a", "09:15", "09:45")

        assert [item.id for item in find_conflicts(candidate, existing)] == ["b"]
        assert find_conflicts(candidate, existing, exclude_id="b") == []

    def test_touching_events_do_not_conflict(self):
        existing = [_event("a", "09:00", "10:00")]
        assert not conflicts_with_any(_event("new", "10:00", "10:30"), existing)
        assert conflicts_with_any(_event("new", "09:59", "10:30"), existing)
