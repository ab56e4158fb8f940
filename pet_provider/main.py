"""Pet Provider API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map PetProviderError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database, change notifier and provider built once on startup via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Provider and notifier stored on app.state, handed to routes by dependencies
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pet_provider.api.error_handlers import register_error_handlers
from pet_provider.api.routes import change_stream, content_resolver, health
from pet_provider.config import get_settings
from pet_provider.db.base import Base
from pet_provider.infrastructure.change_notifier import get_change_notifier
from pet_provider.infrastructure.database import init_db
from pet_provider.infrastructure.observability import setup_logging
from pet_provider.infrastructure.sql_storage import SqlStorageEngine
from pet_provider.services.pet_provider import PetProvider
from pet_provider.models import pets_table  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_create_tables:
        await db.create_all(Base.metadata)
    notifier = get_change_notifier()
    app.state.notifier = notifier
    app.state.provider = PetProvider(
        SqlStorageEngine(db), notifier,
        authority=settings.content_authority,
    )
    logger.info("Pet Provider API started")
    yield
    await notifier.wait_idle()
    await db.dispose()
    logger.info("Pet Provider API shutting down")


app = FastAPI(
    title="Pet Provider API", version="1.0.0", lifespan=lifespan,
)

# CORS — configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(content_resolver.router)
app.include_router(change_stream.router)

register_error_handlers(app)
