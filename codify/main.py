"""Codify API — FastAPI application entry point and composition root.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - The connection pool is created once here (lifespan) and disposed on shutdown;
      nothing below this module references it except through dependencies
    - CORS configured from settings (not hardcoded)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import codify.infrastructure.database as database
from codify.api.error_handlers import register_error_handlers
from codify.api.routes import favorites, health, projects, users
from codify.config import get_settings
from codify.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format, settings.log_sql)
    manager = database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_timeout=settings.database_pool_timeout,
    )
    logger.info("Codify API started")
    yield
    await manager.dispose()
    logger.info("Codify API shutting down")


app = FastAPI(title="Codify API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(users.router)
app.include_router(projects.router)
app.include_router(favorites.router)

register_error_handlers(app)
