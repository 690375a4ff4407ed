"""
Calendar Engine - Main Application Entry Point
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from calendar_engine import __version__
from calendar_engine.core.config import get_settings
from calendar_engine.core.logger import setup_logger

logger = setup_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    settings = get_settings()
    logger.info(f"Starting Calendar Engine in {settings.ENVIRONMENT} mode...")

    if settings.ENVIRONMENT == "local":
        from calendar_engine.infrastructure.local.database import init_db

        await init_db()

    yield

    logger.info("Shutting down Calendar Engine...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Calendar Engine",
        description="Recurring events, task projection and day layout for a weekly calendar",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    from calendar_engine.api import events, schedule

    app.include_router(schedule.router, prefix="/api/schedule", tags=["schedule"])
    app.include_router(events.router, prefix="/api/events", tags=["events"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "environment": settings.ENVIRONMENT,
            "version": __version__,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "calendar_engine.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
