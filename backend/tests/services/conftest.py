"""Service test fixtures — async in-memory SQLite store with the real catalog schema.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Foreign keys are enforced, so removal cascades like in production
    - StoreSeeder writes rows directly (outside the catalog API), like ingestion does

Design Decisions:
    - SQLite in-memory: fast, no external dependency; the read path uses no
      PostgreSQL-specific SQL
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

import catalog.models  # noqa: F401
from catalog.db.base import Base
from catalog.infrastructure.database import enable_sqlite_foreign_keys
from catalog.services.entities_catalog import EntitiesCatalog
from tests.services.catalog_store import StoreSeeder


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def store(test_db):
    return StoreSeeder(test_db)


@pytest.fixture
def entities_catalog(test_db):
    return EntitiesCatalog(test_db)
