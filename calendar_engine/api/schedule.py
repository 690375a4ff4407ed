"""
Schedule API endpoints.

Read-only views of the resolved calendar: instances for a date range,
laid out per day.
"""

from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Query, status

from calendar_engine.api.deps import AppSettings, Context, ScheduleService
from calendar_engine.core.config import Settings
from calendar_engine.models.schedule import (
    ScheduleQueryRequest,
    ScheduleResponse,
    VisibilityFilters,
)
from calendar_engine.utils.date_keys import local_today

router = APIRouter()


def _ensure_range_within_limit(start: date, end: date, settings: Settings) -> None:
    span = (end - start).days + 1
    if span > settings.MAX_RANGE_DAYS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Date range spans {span} days; at most {settings.MAX_RANGE_DAYS} allowed",
        )


@router.get("", response_model=ScheduleResponse)
async def get_schedule(
    service: ScheduleService,
    context: Context,
    settings: AppSettings,
    start: date = Query(..., description="First date (YYYY-MM-DD)"),
    end: date = Query(..., description="Last date, inclusive (YYYY-MM-DD)"),
    schedule_type: Literal["school", "personal", "combined"] = Query("combined"),
    show_imported: bool = Query(True),
) -> ScheduleResponse:
    """Laid-out schedule for an inclusive date range."""
    _ensure_range_within_limit(start, end, settings)
    filters = VisibilityFilters(schedule_type=schedule_type, show_imported=show_imported)
    context = context.model_copy(update={"filters": filters})
    return await service.get_schedule(context, start, end)


@router.post("/query", response_model=ScheduleResponse)
async def query_schedule(
    request: ScheduleQueryRequest,
    service: ScheduleService,
    context: Context,
    settings: AppSettings,
) -> ScheduleResponse:
    """Laid-out schedule with full visibility filters."""
    _ensure_range_within_limit(request.range_start, request.range_end, settings)
    context = context.model_copy(update={"filters": request.filters})
    return await service.get_schedule(context, request.range_start, request.range_end)


@router.get("/week", response_model=ScheduleResponse)
async def get_week(
    service: ScheduleService,
    context: Context,
    reference: Optional[date] = Query(None, description="Any date in the week (default: today)"),
    offset: int = Query(0, ge=-520, le=520, description="Weeks to move from reference"),
) -> ScheduleResponse:
    """Sunday-first week view."""
    return await service.get_week(context, reference or local_today(), offset)
