"""
Task projection.

Projects task records onto the calendar as read-only TaskInstances, and
applies calendar edits (move, resize) back onto task records.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from calendar_engine.core.logger import setup_logger
from calendar_engine.models.enums import TaskStatus
from calendar_engine.models.instance import TaskInstance
from calendar_engine.models.schedule import ScheduleContext
from calendar_engine.models.task import Task
from calendar_engine.utils.time_math import (
    DAY_MAX,
    clamp_minutes,
    ensure_time_format,
    to_minutes,
    to_time_string,
)

logger = setup_logger(__name__)

TASK_INSTANCE_PREFIX = "task-"


def task_instance_id(task_id: str) -> str:
    return f"{TASK_INSTANCE_PREFIX}{task_id}"


def is_schedulable(task: Task) -> bool:
    """Whether a task shows up on the calendar at all."""
    if task.status == TaskStatus.COMPLETED:
        return False
    return task.start_date is not None or task.due_date is not None


def task_time_range(task: Task, context: ScheduleContext) -> tuple[date, int, int]:
    """
    Resolve the calendar date and minute range of a schedulable task.

    - Date: the start date if present, else the due date.
    - Start: the start time when placed by start date, else the due time.
    - End: the due time when start and due fall on the same day and the due
      time is later; otherwise start + estimated minutes, clamped to 23:59.
      The estimate always runs forward (due 14:00, 45 min -> 14:00-14:45).
    """
    default = context.default_start_time
    if task.start_date is not None:
        event_date = task.start_date
        start = to_minutes(ensure_time_format(task.start_time, default))
    else:
        event_date = task.due_date
        start = to_minutes(ensure_time_format(task.due_time, default))

    end: Optional[int] = None
    if (
        task.start_date is not None
        and task.start_date == task.due_date
        and task.due_time
    ):
        due = to_minutes(ensure_time_format(task.due_time, default))
        if due > start:
            end = due

    if end is None:
        estimate = task.estimated_minutes or context.default_task_minutes
        end = clamp_minutes(start + estimate, hi=DAY_MAX)

    if end <= start:
        # Clamped at the end of the day; keep a visible block
        start = max(0, end - context.min_duration_minutes)
    return event_date, start, end


def project_task(task: Task, context: ScheduleContext) -> Optional[TaskInstance]:
    """Build the calendar instance of a task, or None if it is not shown."""
    if not is_schedulable(task):
        return None
    event_date, start, end = task_time_range(task, context)
    return TaskInstance(
        id=task_instance_id(task.id),
        task_id=task.id,
        title=task.title,
        date=event_date,
        start_time=to_time_string(start),
        end_time=to_time_string(end),
        color=task.color,
        description=task.description,
        list_id=task.list_id,
        priority=task.priority,
        status=task.status,
    )


def apply_task_move(task: Task, new_date: date, new_time: str) -> Task:
    """
    Move a task to a new date and start time.

    A task whose start and due fall on the same day keeps its duration (the
    due time shifts along, clamped to 23:59). A task without a due date gets
    the new date as its due date.
    """
    duration = 0
    if task.start_time and task.due_time and task.start_date == task.due_date:
        duration = to_minutes(ensure_time_format(task.due_time)) - to_minutes(
            ensure_time_format(task.start_time)
        )

    new_start = to_minutes(new_time)
    update: dict = {"start_date": new_date, "start_time": to_time_string(new_start)}
    if duration > 0:
        update["due_date"] = new_date
        update["due_time"] = to_time_string(new_start + duration)
    elif task.due_date is None:
        update["due_date"] = new_date

    logger.debug(f"Task {task.id} moved to {new_date} {update['start_time']}")
    return task.model_copy(update=update)


def apply_task_resize(task: Task, start_time: str, end_time: str) -> Task:
    """Set a task's start/due times from a resized block and re-estimate it."""
    start, end = to_minutes(start_time), to_minutes(end_time)
    update = {
        "start_time": to_time_string(start),
        "due_time": to_time_string(end),
        "estimated_minutes": max(0, end - start),
    }
    if task.start_date is None:
        update["start_date"] = task.due_date
    return task.model_copy(update=update)
