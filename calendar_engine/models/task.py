"""
Task records supplied by the task collaborator.

Tasks are never stored as events; the engine projects them into read-only
TaskInstances on every query.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from calendar_engine.models.enums import Priority, TaskStatus
from calendar_engine.utils.date_keys import DateKey


class Task(BaseModel):
    """A task with optional scheduling information."""

    id: str
    title: str = Field("", max_length=500)
    status: TaskStatus = TaskStatus.NOT_STARTED
    priority: Priority = Priority.MEDIUM
    list_id: Optional[str] = None
    color: Optional[str] = None
    description: str = ""
    start_date: Optional[DateKey] = None
    start_time: Optional[str] = None
    due_date: Optional[DateKey] = None
    due_time: Optional[str] = None
    estimated_minutes: Optional[int] = Field(None, ge=0)

    model_config = {"from_attributes": True}
