"""
Event definition models.

An EventDefinition is the stored, authoritative record. It is either a
one-off event, a recurring definition, or an override that replaces one
generated occurrence of a recurring definition (parent_event_id set).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from calendar_engine.core.exceptions import InvalidTimeFormat
from calendar_engine.models.enums import EventType, RepeatType, ScheduleType
from calendar_engine.utils.date_keys import DateKey
from calendar_engine.utils.time_math import to_minutes, to_time_string


def _normalize_time(value: str) -> str:
    try:
        return to_time_string(to_minutes(value))
    except InvalidTimeFormat as exc:
        raise ValueError(exc.message) from exc


class EventBase(BaseModel):
    """Fields shared by stored events and their input schemas."""

    title: str = Field("", max_length=500)
    date: DateKey
    start_time: str = Field("09:00", description="HH:MM")
    end_time: str = Field("10:00", description="HH:MM")
    type: EventType = EventType.OTHER
    recurring: bool = False
    repeat_until: Optional[DateKey] = None
    parent_event_id: Optional[str] = None
    location: str = Field("", max_length=500)
    description: str = Field("", max_length=5000)
    color: Optional[str] = Field(None, max_length=32)
    schedule_type: ScheduleType = ScheduleType.SCHOOL
    is_imported: bool = False
    imported_calendar_id: Optional[str] = None


class EventCreate(EventBase):
    """Create a new event definition from user input."""

    id: Optional[str] = None
    repeat_type: Optional[RepeatType] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return _normalize_time(value)

    @model_validator(mode="after")
    def validate_interval(self):
        if to_minutes(self.start_time) >= to_minutes(self.end_time):
            raise ValueError("end_time must be after start_time")
        if self.recurring and self.repeat_type is None:
            raise ValueError("repeat_type is required for recurring events")
        if self.repeat_until and self.repeat_until < self.date:
            raise ValueError("repeat_until must not be before date")
        return self


class EventUpdate(BaseModel):
    """Update event fields."""

    title: Optional[str] = Field(None, max_length=500)
    date: Optional[DateKey] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    type: Optional[EventType] = None
    recurring: Optional[bool] = None
    repeat_type: Optional[RepeatType] = None
    repeat_until: Optional[DateKey] = None
    location: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = Field(None, max_length=5000)
    color: Optional[str] = Field(None, max_length=32)
    schedule_type: Optional[ScheduleType] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _normalize_time(value)


class EventDefinition(EventBase):
    """Stored event definition with metadata.

    Times and repeat_type are kept as stored: malformed values are tolerated
    here and normalized (or skipped) by the engine when resolving instances.
    """

    id: str
    repeat_type: Optional[str] = None
    # Occurrence date an override replaces (its own date may differ after a move)
    original_date: Optional[DateKey] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @property
    def is_override(self) -> bool:
        return self.parent_event_id is not None
