"""
SQLite implementation of event repository.
"""

from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import uuid4

from sqlalchemy import and_, delete, or_, select

from calendar_engine.core.exceptions import NotFoundError, ValidationError
from calendar_engine.core.logger import setup_logger
from calendar_engine.infrastructure.local.database import ScheduleEventORM, get_session_factory
from calendar_engine.interfaces.event_repository import IEventRepository
from calendar_engine.models.event import EventCreate, EventDefinition, EventUpdate
from calendar_engine.utils.date_keys import utc_now
from calendar_engine.utils.time_math import to_minutes

logger = setup_logger(__name__)


class SqliteEventRepository(IEventRepository):
    """SQLite implementation of event repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: ScheduleEventORM) -> EventDefinition:
        """Convert ORM object to Pydantic model."""
        return EventDefinition.model_validate(orm, from_attributes=True)

    def _model_to_row(self, definition: EventDefinition) -> dict:
        row = definition.model_dump()
        row["type"] = definition.type.value
        row["schedule_type"] = definition.schedule_type.value
        now = utc_now()
        row["created_at"] = definition.created_at or now
        row["updated_at"] = definition.updated_at or now
        return row

    async def list(
        self,
        range_start: Optional[date] = None,
        range_end: Optional[date] = None,
    ) -> list[EventDefinition]:
        """List stored definitions, optionally limited to a date range."""
        async with self._session_factory() as session:
            query = select(ScheduleEventORM)
            if range_start is not None and range_end is not None:
                dated_in_range = and_(
                    ScheduleEventORM.date >= range_start,
                    ScheduleEventORM.date <= range_end,
                )
                # Overrides moved out of the range still suppress their occurrence
                replaces_in_range = and_(
                    ScheduleEventORM.original_date >= range_start,
                    ScheduleEventORM.original_date <= range_end,
                )
                series = and_(
                    ScheduleEventORM.recurring.is_(True),
                    ScheduleEventORM.parent_event_id.is_(None),
                    ScheduleEventORM.date <= range_end,
                    or_(
                        ScheduleEventORM.repeat_until.is_(None),
                        ScheduleEventORM.repeat_until >= range_start,
                    ),
                )
                query = query.where(or_(dated_in_range, replaces_in_range, series))
            query = query.order_by(
                ScheduleEventORM.date, ScheduleEventORM.start_time, ScheduleEventORM.id
            )
            result = await session.execute(query)
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def get(self, event_id: str) -> Optional[EventDefinition]:
        """Get a definition by ID."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(ScheduleEventORM).where(ScheduleEventORM.id == event_id)
            )
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def save(self, definition: EventDefinition) -> EventDefinition:
        """Insert or replace a definition."""
        async with self._session_factory() as session:
            orm = await session.merge(ScheduleEventORM(**self._model_to_row(definition)))
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def create(self, data: EventCreate) -> EventDefinition:
        """Create a new definition."""
        fields = data.model_dump(mode="json")
        fields["id"] = data.id or str(uuid4())
        now = utc_now()
        definition = EventDefinition.model_validate(
            {**fields, "created_at": now, "updated_at": now}
        )
        saved = await self.save(definition)
        logger.info(f"Created event {saved.id} on {saved.date}")
        return saved

    async def update(self, event_id: str, update: EventUpdate) -> EventDefinition:
        """
        Update a definition.

        Raises:
            NotFoundError: If the definition does not exist
            ValidationError: If the merged times or rule are inconsistent
        """
        existing = await self.get(event_id)
        if existing is None:
            raise NotFoundError(f"Event {event_id} not found")

        changes = update.model_dump(exclude_unset=True, mode="json")
        merged = EventDefinition.model_validate(
            {
                **existing.model_dump(mode="json"),
                **changes,
                "updated_at": utc_now(),
            }
        )

        if "start_time" in changes or "end_time" in changes:
            if to_minutes(merged.start_time) >= to_minutes(merged.end_time):
                raise ValidationError(
                    "end_time must be after start_time",
                    details={"start_time": merged.start_time, "end_time": merged.end_time},
                )
        if merged.recurring and not merged.repeat_type:
            raise ValidationError("repeat_type is required for recurring events")
        if not merged.recurring:
            merged = merged.model_copy(update={"repeat_type": None, "repeat_until": None})

        return await self.save(merged)

    async def delete(self, event_id: str) -> bool:
        """
        Delete a definition.

        Deleting a recurring definition also removes its overrides.
        """
        async with self._session_factory() as session:
            result = await session.execute(
                select(ScheduleEventORM).where(ScheduleEventORM.id == event_id)
            )
            orm = result.scalar_one_or_none()
            if not orm:
                return False
            await session.execute(
                delete(ScheduleEventORM).where(ScheduleEventORM.parent_event_id == event_id)
            )
            await session.delete(orm)
            await session.commit()
            logger.info(f"Deleted event {event_id}")
            return True
