"""
Event repository interface.

Defines contract for event definition persistence operations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from calendar_engine.models.event import EventCreate, EventDefinition, EventUpdate


class IEventRepository(ABC):
    """Abstract interface for the event store."""

    @abstractmethod
    async def list(
        self,
        range_start: Optional[date] = None,
        range_end: Optional[date] = None,
    ) -> list[EventDefinition]:
        """
        List stored definitions.

        With a range, returns every definition that can contribute an
        occurrence to it: one-off events and overrides dated inside the
        range, and recurring definitions anchored on or before range_end
        whose repeat_until is unset or on or after range_start.
        """
        pass

    @abstractmethod
    async def get(self, event_id: str) -> Optional[EventDefinition]:
        """Get a definition by ID."""
        pass

    @abstractmethod
    async def save(self, definition: EventDefinition) -> EventDefinition:
        """Insert or replace a definition."""
        pass

    @abstractmethod
    async def create(self, data: EventCreate) -> EventDefinition:
        """Create a new definition."""
        pass

    @abstractmethod
    async def update(self, event_id: str, update: EventUpdate) -> EventDefinition:
        """Update a definition."""
        pass

    @abstractmethod
    async def delete(self, event_id: str) -> bool:
        """Delete a definition."""
        pass
