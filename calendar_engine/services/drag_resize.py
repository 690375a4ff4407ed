"""
Drag/resize controller.

A small state machine that turns pointer movement into snapped start/end
times and commits the result when the gesture ends:

    IDLE -> RESIZING -> IDLE   (top or bottom handle)
    IDLE -> DRAGGING -> IDLE   (move to another hour cell / day)

Only one gesture is active at a time. Whatever happens during a commit,
the controller is back in IDLE afterwards.
"""

from __future__ import annotations

import inspect
import math
from dataclasses import dataclass
from datetime import date
from typing import Awaitable, Callable, Optional, Union

from calendar_engine.core.exceptions import BusinessLogicError, GestureStateError, NotFoundError
from calendar_engine.core.logger import setup_logger
from calendar_engine.interfaces.event_repository import IEventRepository
from calendar_engine.interfaces.task_repository import ITaskRepository
from calendar_engine.models.enums import GestureState, ResizeHandle
from calendar_engine.models.gesture import DragGesture, DropTarget, GestureOutcome
from calendar_engine.models.instance import EventInstance, Instance, TaskInstance
from calendar_engine.models.schedule import ScheduleContext
from calendar_engine.services.recurrence_expander import RecurrenceExpander
from calendar_engine.services.task_projection import apply_task_move, apply_task_resize
from calendar_engine.utils.date_keys import utc_now
from calendar_engine.utils.time_math import (
    clamp_minutes,
    round_half_up,
    snap_to_grid,
    to_minutes,
    to_time_string,
)

logger = setup_logger(__name__)

RefreshCallback = Callable[[], Union[Awaitable[None], None]]


def enforce_min_duration(start: int, end: int, context: ScheduleContext) -> tuple[int, int]:
    """Keep [start, end) inside the day and at least min_duration long."""
    lo, hi = context.day_start_minutes, context.day_end_minutes
    minimum = context.min_duration_minutes
    start = clamp_minutes(start, lo, hi)
    end = clamp_minutes(end, lo, hi)
    if end - start < minimum:
        end = min(hi, start + minimum)
        start = max(lo, end - minimum)
    return start, end


def resize_times(
    handle: ResizeHandle,
    original_start: int,
    original_end: int,
    snapped_delta: int,
    context: ScheduleContext,
) -> tuple[int, int]:
    """New (start, end) minutes after moving one handle by snapped_delta."""
    minimum = context.min_duration_minutes
    if handle == ResizeHandle.TOP:
        start = clamp_minutes(
            original_start + snapped_delta, context.day_start_minutes, original_end - minimum
        )
        end = original_end
    else:
        start = original_start
        end = clamp_minutes(
            original_end + snapped_delta, original_start + minimum, context.day_end_minutes
        )
    return enforce_min_duration(start, end, context)


def drop_start_minutes(target: DropTarget, context: ScheduleContext) -> int:
    """Start minute for a drop: the hour plus the grid slot under the pointer."""
    slots_per_hour = max(1, 60 // context.grid_minutes)
    slot = math.floor(target.offset_y / target.slot_height_px * slots_per_hour)
    slot = clamp_minutes(slot, 0, slots_per_hour - 1)
    return target.hour * 60 + slot * context.grid_minutes


@dataclass
class _Session:
    """State of the active gesture."""

    instance: Instance
    original_start: int
    original_end: int
    new_date: date
    new_start: int
    new_end: int
    handle: Optional[ResizeHandle] = None
    start_y: float = 0.0

    @property
    def changed(self) -> bool:
        return (self.new_date, self.new_start, self.new_end) != (
            self.instance.date,
            self.original_start,
            self.original_end,
        )

    def outcome(self, committed: bool) -> GestureOutcome:
        return GestureOutcome(
            instance_id=self.instance.id,
            date=self.new_date,
            start_time=to_time_string(self.new_start),
            end_time=to_time_string(self.new_end),
            changed=self.changed,
            committed=committed,
        )


class DragResizeController:
    """Interactive move/resize of calendar instances."""

    def __init__(
        self,
        context: ScheduleContext,
        event_repo: IEventRepository,
        task_repo: Optional[ITaskRepository] = None,
        expander: Optional[RecurrenceExpander] = None,
        on_refresh: Optional[RefreshCallback] = None,
    ):
        self.context = context
        self.event_repo = event_repo
        self.task_repo = task_repo
        self.expander = expander or RecurrenceExpander()
        self.on_refresh = on_refresh
        self._state = GestureState.IDLE
        self._session: Optional[_Session] = None

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state != GestureState.IDLE

    def _begin(self, state: GestureState, instance: Instance, **extra) -> None:
        if self.is_active:
            raise GestureStateError(
                f"Cannot start {state.value}: a {self._state.value} gesture is active",
                details={"instance_id": instance.id},
            )
        start, end = to_minutes(instance.start_time), to_minutes(instance.end_time)
        self._session = _Session(
            instance=instance,
            original_start=start,
            original_end=end,
            new_date=instance.date,
            new_start=start,
            new_end=end,
            **extra,
        )
        self._state = state

    def _require(self, state: GestureState) -> _Session:
        if self._state != state or self._session is None:
            raise GestureStateError(
                f"Expected {state.value} gesture, controller is {self._state.value}"
            )
        return self._session

    def cancel(self) -> None:
        """Abandon the active gesture without committing."""
        self._state = GestureState.IDLE
        self._session = None

    # ===========================================
    # Resize
    # ===========================================

    def begin_resize(
        self,
        instance: Instance,
        handle: ResizeHandle,
        start_y: float = 0.0,
    ) -> None:
        """Capture the original times and pointer position of a resize."""
        self._begin(GestureState.RESIZING, instance, handle=handle, start_y=start_y)

    def update_resize(self, gesture: DragGesture) -> tuple[str, str]:
        """
        Apply pointer movement to the active resize.

        Returns:
            Preview (start_time, end_time)
        """
        session = self._require(GestureState.RESIZING)
        delta_minutes = round_half_up(gesture.pointer_delta_y / self.context.px_per_minute)
        snapped = snap_to_grid(delta_minutes, self.context.grid_minutes)
        session.new_start, session.new_end = resize_times(
            session.handle,
            session.original_start,
            session.original_end,
            snapped,
            self.context,
        )
        return to_time_string(session.new_start), to_time_string(session.new_end)

    async def end_resize(self) -> GestureOutcome:
        """Finish the resize, committing if the times changed."""
        session = self._require(GestureState.RESIZING)
        try:
            committed = False
            if session.changed:
                await self._commit(session, resized=True)
                committed = True
            return session.outcome(committed)
        finally:
            self.cancel()

    # ===========================================
    # Drag to move
    # ===========================================

    def begin_drag(self, instance: Instance) -> None:
        """Start moving an instance."""
        self._begin(GestureState.DRAGGING, instance)

    def preview_drop(self, target: DropTarget) -> tuple[date, str, str]:
        """
        Where the instance would land on target, keeping its duration.

        Returns:
            (date, start_time, end_time)
        """
        session = self._require(GestureState.DRAGGING)
        duration = session.original_end - session.original_start
        if duration <= 0:
            duration = self.context.min_duration_minutes
        start = drop_start_minutes(target, self.context)
        start, end = enforce_min_duration(
            start,
            min(start + duration, self.context.day_end_minutes),
            self.context,
        )
        session.new_date, session.new_start, session.new_end = target.date, start, end
        return target.date, to_time_string(start), to_time_string(end)

    async def drop(self, target: DropTarget) -> GestureOutcome:
        """Finish the move on target, committing if anything changed."""
        session = self._require(GestureState.DRAGGING)
        try:
            self.preview_drop(target)
            committed = False
            if session.changed:
                await self._commit(session, resized=False)
                committed = True
            return session.outcome(committed)
        finally:
            self.cancel()

    # ===========================================
    # Commit
    # ===========================================

    async def _commit(self, session: _Session, resized: bool) -> None:
        instance = session.instance
        start_time = to_time_string(session.new_start)
        end_time = to_time_string(session.new_end)

        if isinstance(instance, TaskInstance):
            await self._commit_task(instance, session.new_date, start_time, end_time, resized)
        else:
            await self._commit_event(instance, session.new_date, start_time, end_time)

        logger.info(
            f"{'Resized' if resized else 'Moved'} {instance.id} to "
            f"{session.new_date} {start_time}-{end_time}"
        )
        if self.on_refresh is not None:
            result = self.on_refresh()
            if inspect.isawaitable(result):
                await result

    async def _commit_event(
        self,
        instance: EventInstance,
        new_date: date,
        start_time: str,
        end_time: str,
    ) -> None:
        if instance.is_generated:
            definition = await self.event_repo.get(instance.parent_event_id)
            if definition is None:
                raise NotFoundError(f"Event {instance.parent_event_id} not found")
            override = self.expander.materialize_override(
                definition,
                instance.date,
                date=new_date,
                start_time=start_time,
                end_time=end_time,
            )
            await self.event_repo.save(override)
            return

        definition = await self.event_repo.get(instance.id)
        if definition is None:
            raise NotFoundError(f"Event {instance.id} not found")
        await self.event_repo.save(
            definition.model_copy(
                update={
                    "date": new_date,
                    "start_time": start_time,
                    "end_time": end_time,
                    "updated_at": utc_now(),
                }
            )
        )

    async def _commit_task(
        self,
        instance: TaskInstance,
        new_date: date,
        start_time: str,
        end_time: str,
        resized: bool,
    ) -> None:
        if self.task_repo is None:
            raise BusinessLogicError("No task repository configured")
        task = await self.task_repo.get(instance.task_id)
        if task is None:
            raise NotFoundError(f"Task {instance.task_id} not found")
        if resized:
            updated = apply_task_resize(task, start_time, end_time)
        else:
            updated = apply_task_move(task, new_date, start_time)
        await self.task_repo.save(updated)
