"""
Enum definitions for the calendar engine.
"""

from enum import Enum


class EventType(str, Enum):
    """Calendar event category."""

    CLASS = "class"
    STUDY = "study"
    PERSONAL = "personal"
    WORK = "work"
    MEETING = "meeting"
    DEADLINE = "deadline"
    OTHER = "other"


class RepeatType(str, Enum):
    """Supported recurrence rules."""

    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class ScheduleType(str, Enum):
    """Which schedule an event belongs to."""

    SCHOOL = "school"
    PERSONAL = "personal"


class TaskStatus(str, Enum):
    """Status of a task coming from the task collaborator."""

    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class Priority(str, Enum):
    """Task priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ResizeHandle(str, Enum):
    """Which edge of an event is being dragged."""

    TOP = "top"
    BOTTOM = "bottom"


class GestureState(str, Enum):
    """Pointer gesture state of the drag/resize controller."""

    IDLE = "idle"
    RESIZING = "resizing"
    DRAGGING = "dragging"
