"""Loyalty Pool API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map LoyaltyPoolError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Request logging middleware replaces a separate access-log layer: one line per
      request with method, path, and content type
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from loyaltypool.api.error_handlers import register_error_handlers
from loyaltypool.api.routes import discount, feedback, health
from loyaltypool.config import get_settings
from loyaltypool.infrastructure import database
from loyaltypool.infrastructure.observability import setup_logging

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
    if settings.database_create_tables:
        await database.db_manager.create_all()
    logger.info("Loyalty Pool API started")
    yield
    await database.db_manager.engine.dispose()
    logger.info("Loyalty Pool API shutting down")


app = FastAPI(
    title="Loyalty Pool API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(
        f"Incoming request: {request.method} {request.url.path} "
        f"Content-Type: {request.headers.get('content-type')}",
        extra={"path": request.url.path},
    )
    return await call_next(request)


app.include_router(health.router)
app.include_router(discount.router)
app.include_router(feedback.router)

register_error_handlers(app)
