"""Pydantic models (schemas) for the calendar engine."""

from calendar_engine.models.enums import (
    EventType,
    GestureState,
    Priority,
    RepeatType,
    ResizeHandle,
    ScheduleType,
    TaskStatus,
)
from calendar_engine.models.event import EventCreate, EventDefinition, EventUpdate
from calendar_engine.models.gesture import DragGesture, DropTarget, GestureOutcome
from calendar_engine.models.instance import EventInstance, Instance, LayoutSlot, TaskInstance
from calendar_engine.models.schedule import (
    DayLayout,
    ScheduleContext,
    ScheduleResponse,
    VisibilityFilters,
)
from calendar_engine.models.task import Task

__all__ = [
    # Enums
    "EventType",
    "GestureState",
    "Priority",
    "RepeatType",
    "ResizeHandle",
    "ScheduleType",
    "TaskStatus",
    # Events
    "EventCreate",
    "EventDefinition",
    "EventUpdate",
    # Tasks
    "Task",
    # Instances
    "EventInstance",
    "Instance",
    "LayoutSlot",
    "TaskInstance",
    # Schedule
    "DayLayout",
    "ScheduleContext",
    "ScheduleResponse",
    "VisibilityFilters",
    # Gestures
    "DragGesture",
    "DropTarget",
    "GestureOutcome",
]
