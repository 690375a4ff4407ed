"""
Overlap layout engine.

Assigns every instance of a day a horizontal slot so that simultaneous
instances render side by side:

1. Sort by (start, end).
2. Group into clusters connected by direct or transitive overlap.
3. Pack each cluster greedily into columns; N columns give every member
   width 100/N and left column*100/N.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Sequence

from calendar_engine.core.exceptions import DegenerateInterval, InvalidTimeFormat
from calendar_engine.core.logger import setup_logger
from calendar_engine.models.instance import Instance, LayoutSlot
from calendar_engine.models.schedule import DayLayout
from calendar_engine.services.interval_overlap import overlaps
from calendar_engine.utils.time_math import to_minutes

logger = setup_logger(__name__)

FULL_WIDTH = LayoutSlot(width=100.0, left=0.0)
ZERO_WIDTH = LayoutSlot(width=0.0, left=0.0)


@dataclass
class _Span:
    """An instance with its parsed minute range."""

    instance: Instance
    start: int
    end: int


@dataclass
class Cluster:
    """Instances connected by overlap, packed into columns."""

    columns: list[list[_Span]] = field(default_factory=list)
    start: int = 0
    end: int = 0

    @property
    def size(self) -> int:
        return sum(len(column) for column in self.columns)

    def place(self, span: _Span) -> None:
        """Put span into the first column whose last item ends by span.start."""
        for column in self.columns:
            if column[-1].end <= span.start:
                column.append(span)
                break
        else:
            self.columns.append([span])
        self.end = max(self.end, span.end)


def interval_of(instance: Instance) -> tuple[int, int]:
    """
    Parse an instance's time range into minutes.

    Raises:
        DegenerateInterval: If the times are malformed or start >= end
    """
    try:
        start = to_minutes(instance.start_time)
        end = to_minutes(instance.end_time)
    except InvalidTimeFormat as exc:
        raise DegenerateInterval(instance.id, instance.start_time, instance.end_time) from exc
    if start >= end:
        raise DegenerateInterval(instance.id, instance.start_time, instance.end_time)
    return start, end


class OverlapLayoutEngine:
    """Computes side-by-side layout slots for same-day instances."""

    def _split(self, instances: Iterable[Instance]) -> tuple[list[_Span], list[Instance]]:
        spans: list[_Span] = []
        degenerate: list[Instance] = []
        for instance in instances:
            try:
                start, end = interval_of(instance)
            except DegenerateInterval as exc:
                logger.warning(f"Excluded from layout: {exc.message}")
                degenerate.append(instance)
                continue
            spans.append(_Span(instance, start, end))
        # Stable: equal (start, end) keep their input order
        spans.sort(key=lambda span: (span.start, span.end))
        return spans, degenerate

    def clusters_for(self, instances: Sequence[Instance]) -> list[Cluster]:
        """
        Group valid instances into overlap clusters with column assignment.

        Instances with degenerate intervals are left out.
        """
        spans, _ = self._split(instances)
        return self._pack(spans)

    def columns_for(self, instances: Sequence[Instance]) -> list[list[list[str]]]:
        """Instance ids per column per cluster, for diagnostics and tests."""
        return [
            [[span.instance.id for span in column] for column in cluster.columns]
            for cluster in self.clusters_for(instances)
        ]

    def layout_day(self, instances: Sequence[Instance]) -> list[Instance]:
        """
        Attach a LayoutSlot to every instance of a single day.

        Returns:
            New instance objects in (start, end) order; instances with a
            degenerate interval follow with a zero-width slot.
        """
        spans, degenerate = self._split(instances)
        slots: dict[int, LayoutSlot] = {}

        for cluster in self._pack(spans):
            if cluster.size == 1:
                slots[id(cluster.columns[0][0])] = FULL_WIDTH
                continue
            count = len(cluster.columns)
            width = 100.0 / count
            for index, column in enumerate(cluster.columns):
                for span in column:
                    slots[id(span)] = LayoutSlot(width=width, left=index * width)

        positioned = [
            span.instance.model_copy(update={"layout": slots[id(span)]}) for span in spans
        ]
        positioned.extend(
            instance.model_copy(update={"layout": ZERO_WIDTH}) for instance in degenerate
        )
        return positioned

    def _pack(self, spans: list[_Span]) -> list[Cluster]:
        clusters: list[Cluster] = []
        current: Cluster | None = None
        for span in spans:
            # Spans arrive sorted by start, so overlapping the cluster's
            # overall range means overlapping one of its members.
            if current is None or not overlaps(span.start, span.end, current.start, current.end):
                current = Cluster(start=span.start, end=span.end)
                clusters.append(current)
            current.place(span)
        return clusters

    def layout_days(
        self,
        instances: Iterable[Instance],
        dates: Iterable[date] | None = None,
    ) -> list[DayLayout]:
        """
        Group instances by date and lay out each day.

        Args:
            instances: Instances of any dates
            dates: Dates to include even when empty (defaults to the dates
                that have instances)
        """
        by_date: dict[date, list[Instance]] = defaultdict(list)
        for instance in instances:
            by_date[instance.date].append(instance)

        all_dates = sorted(set(dates or ()) | set(by_date))
        return [
            DayLayout(date=day, instances=self.layout_day(by_date.get(day, [])))
            for day in all_dates
        ]
