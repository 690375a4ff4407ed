"""
Resolved calendar instances.

Instances are created fresh on every schedule query and never persisted.
The Instance union is discriminated by ``kind`` so layout and rendering
code can dispatch on it instead of probing optional fields.
"""

from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from calendar_engine.models.enums import EventType, Priority, ScheduleType, TaskStatus
from calendar_engine.utils.date_keys import DateKey


class LayoutSlot(BaseModel):
    """Horizontal placement of an instance within its day column (percent)."""

    width: float = Field(100.0, ge=0, le=100)
    left: float = Field(0.0, ge=0, le=100)


class InstanceBase(BaseModel):
    """Fields every resolved instance carries."""

    id: str
    title: str = ""
    date: DateKey
    start_time: str
    end_time: str
    type: EventType = EventType.OTHER
    color: Optional[str] = None
    description: str = ""
    layout: Optional[LayoutSlot] = None


class EventInstance(InstanceBase):
    """An occurrence of a stored event definition."""

    kind: Literal["event"] = "event"
    recurring: bool = False
    repeat_type: Optional[str] = None
    repeat_until: Optional[DateKey] = None
    parent_event_id: Optional[str] = None
    location: str = ""
    schedule_type: ScheduleType = ScheduleType.SCHOOL
    is_imported: bool = False
    imported_calendar_id: Optional[str] = None
    is_generated: bool = False


class TaskInstance(InstanceBase):
    """A read-only projection of a task onto the calendar."""

    kind: Literal["task"] = "task"
    type: EventType = EventType.DEADLINE
    task_id: str
    is_task: Literal[True] = True
    list_id: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.NOT_STARTED


Instance = Annotated[Union[EventInstance, TaskInstance], Field(discriminator="kind")]
