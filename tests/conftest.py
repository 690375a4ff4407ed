"""
Shared fixtures: in-memory SQLite session factory and in-memory fakes of
the repository interfaces.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date
from typing import Optional
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from calendar_engine.core.exceptions import NotFoundError
from calendar_engine.infrastructure.local.database import Base
from calendar_engine.interfaces.event_repository import IEventRepository
from calendar_engine.interfaces.task_repository import ITaskRepository
from calendar_engine.models.event import EventCreate, EventDefinition, EventUpdate
from calendar_engine.models.task import Task
from calendar_engine.utils.date_keys import utc_now


class FakeEventRepository(IEventRepository):
    """Dict-backed event store with the same range semantics as SQLite."""

    def __init__(self):
        self.items: dict[str, EventDefinition] = {}
        self.saved: list[EventDefinition] = []

    @staticmethod
    def _relevant(definition: EventDefinition, range_start: date, range_end: date) -> bool:
        if range_start <= definition.date <= range_end:
            return True
        if definition.original_date and range_start <= definition.original_date <= range_end:
            return True
        return (
            definition.recurring
            and definition.parent_event_id is None
            and definition.date <= range_end
            and (definition.repeat_until is None or definition.repeat_until >= range_start)
        )

    async def list(self, range_start=None, range_end=None):
        items = sorted(self.items.values(), key=lambda d: (d.date, d.start_time, d.id))
        if range_start is None or range_end is None:
            return items
        return [d for d in items if self._relevant(d, range_start, range_end)]

    async def get(self, event_id):
        return self.items.get(event_id)

    async def save(self, definition):
        self.items[definition.id] = definition
        self.saved.append(definition)
        return definition

    async def create(self, data: EventCreate):
        fields = data.model_dump(mode="json")
        fields["id"] = data.id or str(uuid4())
        fields["created_at"] = fields["updated_at"] = utc_now()
        return await self.save(EventDefinition.model_validate(fields))

    async def update(self, event_id, update: EventUpdate):
        existing = self.items.get(event_id)
        if existing is None:
            raise NotFoundError(f"Event {event_id} not found")
        merged = EventDefinition.model_validate(
            {**existing.model_dump(mode="json"), **update.model_dump(exclude_unset=True, mode="json")}
        )
        return await self.save(merged)

    async def delete(self, event_id):
        return self.items.pop(event_id, None) is not None


class FakeTaskRepository(ITaskRepository):
    """Dict-backed task collaborator."""

    def __init__(self):
        self.items: dict[str, Task] = {}
        self.saved: list[Task] = []

    async def list(self):
        return list(self.items.values())

    async def get(self, task_id) -> Optional[Task]:
        return self.items.get(task_id)

    async def save(self, task):
        self.items[task.id] = task
        self.saved.append(task)
        return task


@pytest.fixture
async def session_factory():
    """In-memory SQLite session factory with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def fake_event_repo() -> FakeEventRepository:
    return FakeEventRepository()


@pytest.fixture
def fake_task_repo() -> FakeTaskRepository:
    return FakeTaskRepository()
