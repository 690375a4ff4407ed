"""
Schedule query service.

Resolves everything shown on the calendar for a date range: stored one-off
events and overrides, expanded recurring definitions, and task
projections, filtered by the visibility settings of the caller.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from calendar_engine.core.exceptions import RangeMismatch
from calendar_engine.core.logger import setup_logger
from calendar_engine.interfaces.event_repository import IEventRepository
from calendar_engine.interfaces.task_repository import ITaskRepository
from calendar_engine.models.event import EventDefinition
from calendar_engine.models.instance import EventInstance, Instance, TaskInstance
from calendar_engine.models.schedule import ScheduleContext, ScheduleResponse, VisibilityFilters
from calendar_engine.services.overlap_layout import OverlapLayoutEngine
from calendar_engine.services.recurrence_expander import (
    RecurrenceExpander,
    base_instance,
    override_keys,
)
from calendar_engine.services.task_projection import project_task
from calendar_engine.utils.date_keys import iter_dates, week_dates
from calendar_engine.utils.time_math import ensure_time_format, to_minutes

logger = setup_logger(__name__)


def check_range(range_start: date, range_end: date) -> None:
    """
    Raises:
        RangeMismatch: If range_start is after range_end
    """
    if range_start > range_end:
        raise RangeMismatch(
            f"Range start {range_start} is after range end {range_end}",
            details={"range_start": str(range_start), "range_end": str(range_end)},
        )


def is_visible(instance: Instance, filters: VisibilityFilters) -> bool:
    """AND of all visibility predicates; missing keys mean visible."""
    if not filters.visible_types.get(instance.type.value, True):
        return False

    if isinstance(instance, TaskInstance):
        if instance.list_id and not filters.visible_lists.get(instance.list_id, True):
            return False
        return True

    if filters.schedule_type != "combined" and instance.schedule_type.value != filters.schedule_type:
        return False

    if instance.is_imported:
        if not filters.show_imported:
            return False
        calendar_id = instance.imported_calendar_id
        if calendar_id and not filters.imported_calendars.get(calendar_id, True):
            return False
    return True


def sort_key(instance: Instance) -> tuple:
    return (
        instance.date,
        to_minutes(instance.start_time),
        to_minutes(instance.end_time),
        instance.kind,
        instance.id,
    )


class ScheduleQueryService:
    """Builds the resolved, filtered instance list for a date range."""

    def __init__(
        self,
        event_repo: IEventRepository,
        task_repo: Optional[ITaskRepository] = None,
        expander: Optional[RecurrenceExpander] = None,
        layout_engine: Optional[OverlapLayoutEngine] = None,
    ):
        self.event_repo = event_repo
        self.task_repo = task_repo
        self.expander = expander or RecurrenceExpander()
        self.layout_engine = layout_engine or OverlapLayoutEngine()

    def _normalize(self, definition: EventDefinition, context: ScheduleContext) -> EventDefinition:
        start = ensure_time_format(definition.start_time, context.default_start_time)
        end = ensure_time_format(definition.end_time, context.default_start_time)
        if (start, end) == (definition.start_time, definition.end_time):
            return definition
        if any(not ensure_time_format(raw, "") for raw in (definition.start_time, definition.end_time)):
            logger.warning(
                f"Event {definition.id} has malformed times "
                f"{definition.start_time!r}-{definition.end_time!r}; using {start}-{end}"
            )
        return definition.model_copy(update={"start_time": start, "end_time": end})

    def resolve_events(
        self,
        definitions: Iterable[EventDefinition],
        context: ScheduleContext,
        range_start: date,
        range_end: date,
    ) -> list[EventInstance]:
        """Turn stored definitions into event instances inside the range."""
        definitions = [self._normalize(d, context) for d in definitions]
        overrides = override_keys(definitions)

        instances: list[EventInstance] = []
        for definition in definitions:
            if not definition.recurring or definition.is_override:
                if range_start <= definition.date <= range_end:
                    instances.append(base_instance(definition))
                continue
            instances.extend(
                self.expander.expand(definition, range_start, range_end, overrides)
            )
        return instances

    async def _load_tasks(
        self,
        context: ScheduleContext,
        range_start: date,
        range_end: date,
    ) -> list[TaskInstance]:
        if self.task_repo is None:
            return []
        projected: list[TaskInstance] = []
        for task in await self.task_repo.list():
            instance = project_task(task, context)
            if instance is not None and range_start <= instance.date <= range_end:
                projected.append(instance)
        return projected

    async def get_instances(
        self,
        context: ScheduleContext,
        range_start: date,
        range_end: date,
    ) -> list[Instance]:
        """
        Resolve every visible instance in [range_start, range_end].

        Returns:
            Instances ordered by (date, start, end, kind, id). An inverted
            range yields an empty list.
        """
        try:
            check_range(range_start, range_end)
        except RangeMismatch as exc:
            logger.debug(f"Empty schedule: {exc.message}")
            return []

        definitions = await self.event_repo.list(range_start, range_end)
        events = self.resolve_events(definitions, context, range_start, range_end)
        tasks = await self._load_tasks(context, range_start, range_end)

        instances = [
            instance for instance in [*events, *tasks] if is_visible(instance, context.filters)
        ]
        instances.sort(key=sort_key)

        logger.info(
            f"Schedule {range_start}..{range_end}: {len(events)} events, "
            f"{len(tasks)} tasks, {len(instances)} visible"
        )
        return instances

    async def get_schedule(
        self,
        context: ScheduleContext,
        range_start: date,
        range_end: date,
    ) -> ScheduleResponse:
        """Resolve the range and lay out each day (empty days included)."""
        instances = await self.get_instances(context, range_start, range_end)
        days = self.layout_engine.layout_days(instances, iter_dates(range_start, range_end))
        return ScheduleResponse(range_start=range_start, range_end=range_end, days=days)

    async def get_week(
        self,
        context: ScheduleContext,
        reference: date,
        offset: int = 0,
    ) -> ScheduleResponse:
        """Laid-out schedule of the Sunday-first week containing reference."""
        dates = week_dates(reference, offset)
        return await self.get_schedule(context, dates[0], dates[-1])

    async def find_instance(
        self,
        context: ScheduleContext,
        instance_id: str,
        on_date: date,
    ) -> Optional[Instance]:
        """Look up a resolved instance by id on a given date, ignoring filters."""
        unfiltered = context.model_copy(update={"filters": VisibilityFilters()})
        for instance in await self.get_instances(unfiltered, on_date, on_date):
            if instance.id == instance_id:
                return instance
        return None
