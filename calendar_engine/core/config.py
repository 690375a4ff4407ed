"""
Application configuration using Pydantic Settings.

Values are read from environment variables (and an optional .env file).
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Environment
    # ===========================================
    ENVIRONMENT: Literal["local", "test"] = "local"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ===========================================
    # Database
    # ===========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./calendar.db"

    # ===========================================
    # Server
    # ===========================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"]
    )

    # ===========================================
    # Calendar grid
    # ===========================================
    # Minute quantum for drag/resize edits
    SNAP_GRID_MINUTES: int = Field(15, ge=1, le=60)
    MIN_EVENT_MINUTES: int = Field(15, ge=1, le=120)
    # Rendered height of one hour row
    PX_PER_HOUR: float = Field(50.0, gt=0)
    DAY_START_HOUR: int = Field(0, ge=0, le=23)
    DAY_END_TIME: str = "23:59"

    # ===========================================
    # Defaults for incomplete records
    # ===========================================
    DEFAULT_EVENT_TIME: str = "09:00"
    DEFAULT_TASK_MINUTES: int = Field(30, ge=1)

    # ===========================================
    # Query limits
    # ===========================================
    # Longest inclusive date range a schedule request may expand
    MAX_RANGE_DAYS: int = Field(366, ge=1)

    @property
    def is_local(self) -> bool:
        """Check if running in local environment."""
        return self.ENVIRONMENT == "local"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
