"""
Task repository interface.

The engine only reads tasks for projection and writes back time edits made
on the calendar.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from calendar_engine.models.task import Task


class ITaskRepository(ABC):
    """Abstract interface for the task collaborator."""

    @abstractmethod
    async def list(self) -> list[Task]:
        """List all tasks."""
        pass

    @abstractmethod
    async def get(self, task_id: str) -> Optional[Task]:
        """Get a task by ID."""
        pass

    @abstractmethod
    async def save(self, task: Task) -> Task:
        """Insert or replace a task."""
        pass
