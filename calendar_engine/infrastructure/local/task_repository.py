"""
SQLite implementation of task repository.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select

from calendar_engine.infrastructure.local.database import TaskORM, get_session_factory
from calendar_engine.interfaces.task_repository import ITaskRepository
from calendar_engine.models.task import Task


class SqliteTaskRepository(ITaskRepository):
    """SQLite implementation of task repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: TaskORM) -> Task:
        """Convert ORM object to Pydantic model."""
        return Task.model_validate(orm, from_attributes=True)

    async def list(self) -> list[Task]:
        """List all tasks."""
        async with self._session_factory() as session:
            result = await session.execute(select(TaskORM).order_by(TaskORM.id))
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def get(self, task_id: str) -> Optional[Task]:
        """Get a task by ID."""
        async with self._session_factory() as session:
            result = await session.execute(select(TaskORM).where(TaskORM.id == task_id))
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def save(self, task: Task) -> Task:
        """Insert or replace a task."""
        row = task.model_dump()
        row["status"] = task.status.value
        row["priority"] = task.priority.value
        async with self._session_factory() as session:
            orm = await session.merge(TaskORM(**row))
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)
