"""
Dependency injection for API endpoints.

This module provides FastAPI dependencies that inject the infrastructure
implementations and the services built on top of them.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from calendar_engine.core.config import Settings, get_settings
from calendar_engine.interfaces.event_repository import IEventRepository
from calendar_engine.interfaces.task_repository import ITaskRepository
from calendar_engine.models.schedule import ScheduleContext
from calendar_engine.services.recurrence_expander import RecurrenceExpander
from calendar_engine.services.schedule_query import ScheduleQueryService


# ===========================================
# Repository Dependencies
# ===========================================


@lru_cache()
def get_event_repository() -> IEventRepository:
    """Get event repository instance."""
    from calendar_engine.infrastructure.local.event_repository import SqliteEventRepository

    return SqliteEventRepository()


@lru_cache()
def get_task_repository() -> ITaskRepository:
    """Get task repository instance."""
    from calendar_engine.infrastructure.local.task_repository import SqliteTaskRepository

    return SqliteTaskRepository()


# ===========================================
# Service Dependencies
# ===========================================


@lru_cache()
def get_recurrence_expander() -> RecurrenceExpander:
    return RecurrenceExpander()


def get_schedule_service(
    event_repo: Annotated[IEventRepository, Depends(get_event_repository)],
    task_repo: Annotated[ITaskRepository, Depends(get_task_repository)],
    expander: Annotated[RecurrenceExpander, Depends(get_recurrence_expander)],
) -> ScheduleQueryService:
    """Schedule query service over the configured repositories."""
    return ScheduleQueryService(event_repo=event_repo, task_repo=task_repo, expander=expander)


def get_schedule_context(
    settings: Annotated[Settings, Depends(get_settings)],
) -> ScheduleContext:
    """Grid and default values from settings, with everything visible."""
    return ScheduleContext.from_settings(settings)


# Type aliases for cleaner endpoint signatures
EventRepo = Annotated[IEventRepository, Depends(get_event_repository)]
TaskRepo = Annotated[ITaskRepository, Depends(get_task_repository)]
Expander = Annotated[RecurrenceExpander, Depends(get_recurrence_expander)]
ScheduleService = Annotated[ScheduleQueryService, Depends(get_schedule_service)]
Context = Annotated[ScheduleContext, Depends(get_schedule_context)]
AppSettings = Annotated[Settings, Depends(get_settings)]
