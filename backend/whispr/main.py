"""Whispr API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map WhisprError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - One WhisprService per app, built and initialized in the lifespan,
      flushed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - create_app(settings) factory: tests build isolated apps without touching
      process-wide state
    - persistence_backend picks JSON file or SQL; both satisfy SnapshotBackend
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from whispr.api.error_handlers import register_error_handlers
from whispr.api.routes import (
    comments, confessions, crushes, health, market, profiles, realtime,
)
from whispr.config import Settings, get_settings
from whispr.core.clock import utc_now
from whispr.infrastructure.database import DatabaseSessionManager
from whispr.infrastructure.json_backend import JsonFileBackend
from whispr.infrastructure.observability import setup_logging
from whispr.infrastructure.realtime import RealtimeHub
from whispr.infrastructure.sql_backend import SqlSnapshotBackend
from whispr.services.sample_data import sample_confessions, sample_market_items
from whispr.services.whispr_service import WhisprService

logger = logging.getLogger(__name__)


def build_backend(
    settings: Settings,
) -> tuple[JsonFileBackend | SqlSnapshotBackend, DatabaseSessionManager | None]:
    """Pick the snapshot backend. Returns the DB manager too, for disposal."""
    if settings.persistence_backend == "database":
        db_manager = DatabaseSessionManager(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        return SqlSnapshotBackend(db_manager), db_manager
    return JsonFileBackend(settings.data_file), None


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        backend, db_manager = build_backend(settings)
        if db_manager and settings.database_create_tables:
            await db_manager.create_tables()

        hub = RealtimeHub(send_timeout_ms=settings.realtime_send_timeout_ms)
        service = WhisprService.build(
            backend,
            publisher=hub,
            cooldown_ms=settings.reaction_cooldown_ms,
            mutual_probability=settings.crush_mutual_probability,
            debounce_ms=settings.flush_debounce_ms,
        )
        await service.initialize()
        if settings.seed_sample_data:
            now = utc_now()
            await service.seed_if_empty(
                sample_confessions(now), sample_market_items(now),
            )
        app.state.hub = hub
        app.state.service = service
        logger.info(
            f"Whispr API started ({settings.persistence_backend} persistence)",
        )
        yield
        logger.info("Whispr API shutting down")
        await service.shutdown()
        if db_manager:
            await db_manager.dispose()

    app = FastAPI(title="Whispr API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes: explicit registration
    app.include_router(health.router)
    app.include_router(profiles.router)
    app.include_router(confessions.router)
    app.include_router(crushes.router)
    app.include_router(market.router)
    app.include_router(comments.router)
    app.include_router(realtime.router)

    register_error_handlers(app)
    return app


app = create_app()
