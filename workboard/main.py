"""Workboard API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map WorkboardError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager
    - One BroadcastHub per app (app.state.broadcast_hub), closed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Hub created with the app, not in lifespan: in-process test transports
      do not run lifespan and still need it
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from workboard.api.error_handlers import register_error_handlers
from workboard.api.routes import health, live, notifications, projects, reports, tasks, users
from workboard.config import get_settings
from workboard.infrastructure import database
from workboard.infrastructure.broadcast import BroadcastHub
from workboard.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Workboard API started")
    yield
    logger.info("Workboard API shutting down")
    await app.state.broadcast_hub.close()
    if database.db_manager:
        await database.db_manager.dispose()


settings = get_settings()

app = FastAPI(title="Workboard API", version="1.0.0", lifespan=lifespan)
app.state.broadcast_hub = BroadcastHub(queue_size=settings.live_queue_size)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(projects.router)
app.include_router(tasks.router)
app.include_router(notifications.router)
app.include_router(live.router)
app.include_router(reports.router)
app.include_router(users.router)

register_error_handlers(app)
