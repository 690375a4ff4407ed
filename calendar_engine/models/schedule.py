"""
Schedule query inputs and outputs.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from calendar_engine.core.config import Settings, get_settings
from calendar_engine.models.instance import Instance
from calendar_engine.utils.date_keys import DateKey
from calendar_engine.utils.time_math import to_minutes


class VisibilityFilters(BaseModel):
    """Boolean visibility predicates; a missing key means visible."""

    visible_types: dict[str, bool] = Field(default_factory=dict)
    visible_lists: dict[str, bool] = Field(default_factory=dict)
    imported_calendars: dict[str, bool] = Field(default_factory=dict)
    show_imported: bool = True
    schedule_type: Literal["school", "personal", "combined"] = "combined"


class ScheduleContext(BaseModel):
    """Everything an engine call needs besides the data itself."""

    filters: VisibilityFilters = Field(default_factory=VisibilityFilters)
    grid_minutes: int = Field(15, ge=1)
    min_duration_minutes: int = Field(15, ge=1)
    px_per_minute: float = Field(50 / 60, gt=0)
    day_start_minutes: int = Field(0, ge=0, le=1439)
    day_end_minutes: int = Field(1439, ge=0, le=1439)
    default_task_minutes: int = Field(30, ge=1)
    default_start_time: str = "09:00"

    @model_validator(mode="after")
    def validate_day_window(self) -> "ScheduleContext":
        if self.day_end_minutes - self.day_start_minutes < self.min_duration_minutes:
            raise ValueError(
                "day window must fit at least one minimum-duration event "
                f"({self.day_start_minutes}-{self.day_end_minutes}, "
                f"min {self.min_duration_minutes})"
            )
        return self

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        filters: VisibilityFilters | None = None,
    ) -> "ScheduleContext":
        settings = settings or get_settings()
        return cls(
            filters=filters or VisibilityFilters(),
            grid_minutes=settings.SNAP_GRID_MINUTES,
            min_duration_minutes=settings.MIN_EVENT_MINUTES,
            px_per_minute=settings.PX_PER_HOUR / 60,
            day_start_minutes=settings.DAY_START_HOUR * 60,
            day_end_minutes=to_minutes(settings.DAY_END_TIME),
            default_task_minutes=settings.DEFAULT_TASK_MINUTES,
            default_start_time=settings.DEFAULT_EVENT_TIME,
        )


class DayLayout(BaseModel):
    """Instances of one date with layout slots attached."""

    date: DateKey
    instances: list[Instance] = Field(default_factory=list)


class ScheduleResponse(BaseModel):
    """Laid-out schedule for an inclusive date range."""

    range_start: DateKey
    range_end: DateKey
    days: list[DayLayout] = Field(default_factory=list)


class ScheduleQueryRequest(BaseModel):
    """Body of a filtered schedule query."""

    range_start: DateKey
    range_end: DateKey
    filters: VisibilityFilters = Field(default_factory=VisibilityFilters)


class ConflictCheckRequest(BaseModel):
    """Candidate time range to test against the stored schedule."""

    date: DateKey
    start_time: str
    end_time: str
    exclude_id: str | None = None
