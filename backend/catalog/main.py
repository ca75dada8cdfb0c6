"""Catalog Runtime — process lifecycle and per-call catalog wiring.

Invariants:
    - lifespan() configures logging and the database exactly once per process
    - The engine is disposed when lifespan() exits, even on error
    - get_catalog() yields an EntitiesCatalog bound to one managed session

Design Decisions:
    - Transport-agnostic: an HTTP layer (outside this package) enters lifespan() on startup
      and uses get_catalog() as its per-request dependency
    - Lifespan as async context manager, same shape as an ASGI lifespan
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import catalog.infrastructure.database as db_module
from catalog.config import Settings, get_settings
from catalog.core.repository_protocols import EntitiesCatalogLike
from catalog.infrastructure.database import DatabaseSessionManager, init_db
from catalog.infrastructure.observability import setup_logging
from catalog.services.entities_catalog import EntitiesCatalog

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(
    settings: Settings | None = None,
) -> AsyncGenerator[DatabaseSessionManager, None]:
    """Startup/shutdown lifecycle."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        echo=settings.database_echo,
    )
    logger.info("Entity catalog started")
    try:
        yield manager
    finally:
        await manager.dispose()
        db_module.db_manager = None
        logger.info("Entity catalog shutting down")


async def get_catalog() -> AsyncGenerator[EntitiesCatalogLike, None]:
    """Per-call dependency: an EntitiesCatalog over a managed session."""
    async for session in db_module.get_db():
        yield EntitiesCatalog(session)
