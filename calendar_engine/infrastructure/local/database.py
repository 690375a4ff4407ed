"""
SQLite database configuration and ORM models.

This module defines the SQLAlchemy ORM models and database initialization.
"""

from uuid import uuid4

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String, Text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from calendar_engine.core.config import get_settings
from calendar_engine.core.exceptions import InfrastructureError
from calendar_engine.core.logger import setup_logger
from calendar_engine.utils.date_keys import utc_now

logger = setup_logger(__name__)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


# ===========================================
# ORM Models
# ===========================================


class ScheduleEventORM(Base):
    """Stored event definition (one-off, recurring, or override)."""

    __tablename__ = "schedule_events"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid4()))
    title = Column(String(500), nullable=False, default="")
    date = Column(Date, nullable=False, index=True)
    # Kept as text; malformed values are normalized when resolving
    start_time = Column(String(16), nullable=False, default="09:00")
    end_time = Column(String(16), nullable=False, default="10:00")
    type = Column(String(20), nullable=False, default="other")
    recurring = Column(Boolean, default=False, index=True)
    repeat_type = Column(String(20), nullable=True)
    repeat_until = Column(Date, nullable=True)
    parent_event_id = Column(String(64), nullable=True, index=True)
    original_date = Column(Date, nullable=True)
    location = Column(String(500), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    color = Column(String(32), nullable=True)
    schedule_type = Column(String(20), nullable=False, default="school", index=True)
    is_imported = Column(Boolean, default=False)
    imported_calendar_id = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)


class TaskORM(Base):
    """Task record projected onto the calendar."""

    __tablename__ = "tasks"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid4()))
    title = Column(String(500), nullable=False, default="")
    status = Column(String(20), default="not-started", index=True)
    priority = Column(String(10), default="medium")
    list_id = Column(String(64), nullable=True, index=True)
    color = Column(String(32), nullable=True)
    description = Column(Text, nullable=False, default="")
    start_date = Column(Date, nullable=True)
    start_time = Column(String(16), nullable=True)
    due_date = Column(Date, nullable=True)
    due_time = Column(String(16), nullable=True)
    estimated_minutes = Column(Integer, nullable=True)


# ===========================================
# Engine / Session
# ===========================================


def get_engine():
    """Get async engine instance."""
    settings = get_settings()
    return create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG)


def get_session_factory(engine=None):
    """Get async session factory."""
    engine = engine or get_engine()
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine=None):
    """Initialize database tables."""
    engine = engine or get_engine()
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except SQLAlchemyError as e:
        logger.error(f"Database initialization failed: {e}")
        raise InfrastructureError(f"Failed to initialize database: {e}") from e
