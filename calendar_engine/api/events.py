"""
Event API endpoints.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from calendar_engine.api.deps import Context, EventRepo, Expander, ScheduleService
from calendar_engine.core.exceptions import InvalidRecurrenceRule, NotFoundError, ValidationError
from calendar_engine.core.logger import setup_logger
from calendar_engine.models.event import EventCreate, EventDefinition, EventUpdate
from calendar_engine.models.instance import Instance
from calendar_engine.models.schedule import ConflictCheckRequest, VisibilityFilters
from calendar_engine.services.interval_overlap import find_conflicts

logger = setup_logger(__name__)

router = APIRouter()


@router.get("", response_model=list[EventDefinition])
async def list_events(
    repo: EventRepo,
    start: Optional[date] = Query(None, description="Range start (YYYY-MM-DD)"),
    end: Optional[date] = Query(None, description="Range end, inclusive (YYYY-MM-DD)"),
) -> list[EventDefinition]:
    """List stored event definitions, optionally those relevant to a range."""
    return await repo.list(start, end)


@router.post("", response_model=EventDefinition, status_code=status.HTTP_201_CREATED)
async def create_event(payload: EventCreate, repo: EventRepo) -> EventDefinition:
    """Create a one-off or recurring event."""
    return await repo.create(payload)


@router.post("/conflicts", response_model=list[Instance])
async def check_conflicts(
    request: ConflictCheckRequest,
    service: ScheduleService,
    context: Context,
) -> list[Instance]:
    """Events and scheduled tasks on the candidate's date whose time range overlaps it."""
    context = context.model_copy(update={"filters": VisibilityFilters()})
    instances = await service.get_instances(context, request.date, request.date)
    try:
        return find_conflicts(request, instances, exclude_id=request.exclude_id)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.message,
        ) from exc


@router.get("/{event_id}", response_model=EventDefinition)
async def get_event(event_id: str, repo: EventRepo) -> EventDefinition:
    """Get an event definition by ID."""
    result = await repo.get(event_id)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event {event_id} not found",
        )
    return result


@router.patch("/{event_id}", response_model=EventDefinition)
async def update_event(
    event_id: str,
    update: EventUpdate,
    repo: EventRepo,
) -> EventDefinition:
    """Update an event definition."""
    try:
        return await repo.update(event_id, update)
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.message,
        ) from exc


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(event_id: str, repo: EventRepo):
    """Delete an event definition (and the overrides of a recurring one)."""
    deleted = await repo.delete(event_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event {event_id} not found",
        )


@router.post(
    "/{event_id}/occurrences/{occurrence_date}/materialize",
    response_model=EventDefinition,
    status_code=status.HTTP_201_CREATED,
)
async def materialize_occurrence(
    event_id: str,
    occurrence_date: date,
    repo: EventRepo,
    expander: Expander,
) -> EventDefinition:
    """Turn one generated occurrence of a recurring event into a stored override."""
    definition = await repo.get(event_id)
    if not definition:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event {event_id} not found",
        )
    if not definition.recurring or definition.is_override:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Event {event_id} is not a recurring definition",
        )

    try:
        dates = expander.occurrence_dates(definition, occurrence_date, occurrence_date)
    except InvalidRecurrenceRule as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.message,
        ) from exc
    if occurrence_date not in dates or occurrence_date == definition.date:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Event {event_id} has no generated occurrence on {occurrence_date}",
        )

    for existing in await repo.list(occurrence_date, occurrence_date):
        if existing.parent_event_id == event_id and (
            existing.original_date or existing.date
        ) == occurrence_date:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Occurrence {occurrence_date} of {event_id} is already materialized",
            )

    override = await repo.save(expander.materialize_override(definition, occurrence_date))
    logger.info(f"Materialized {event_id} on {occurrence_date} as {override.id}")
    return override
