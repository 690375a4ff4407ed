"""
Custom exceptions for the calendar engine.
"""

from typing import Any, Optional


class CalendarEngineError(Exception):
    """Base exception for the calendar engine."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(CalendarEngineError):
    """Resource not found."""

    pass


class ValidationError(CalendarEngineError):
    """Validation error."""

    pass


class InfrastructureError(CalendarEngineError):
    """Infrastructure-related error (DB, external services, etc.)."""

    pass


class BusinessLogicError(CalendarEngineError):
    """Business logic constraint violation."""

    pass


class InvalidTimeFormat(ValidationError):
    """A time-of-day value is not a valid "HH:MM" string."""

    def __init__(self, value: Any):
        super().__init__(f"Invalid time format: {value!r}", details={"value": value})
        self.value = value


class InvalidRecurrenceRule(ValidationError):
    """A recurring definition carries an unknown repeat type."""

    def __init__(self, repeat_type: Any, event_id: Optional[str] = None):
        super().__init__(
            f"Unknown repeat type {repeat_type!r}",
            details={"repeat_type": repeat_type, "event_id": event_id},
        )
        self.repeat_type = repeat_type
        self.event_id = event_id


class DegenerateInterval(ValidationError):
    """An interval whose start is not before its end."""

    def __init__(self, instance_id: str, start_time: str, end_time: str):
        super().__init__(
            f"Degenerate interval for {instance_id}: {start_time}-{end_time}",
            details={"id": instance_id, "start_time": start_time, "end_time": end_time},
        )
        self.instance_id = instance_id


class RangeMismatch(ValidationError):
    """A date range whose start is after its end."""

    pass


class GestureStateError(BusinessLogicError):
    """A pointer gesture was started or continued in the wrong state."""

    pass
