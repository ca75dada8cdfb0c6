"""Alembic environment — runs catalog migrations through the async engine.

Invariants:
    - The database URL comes from catalog.config.Settings (DATABASE_URL / .env), so the
      postgresql:// -> postgresql+asyncpg:// rewrite lives in one place
    - Base.metadata is complete (catalog.models imported) before autogenerate compares it

Design Decisions:
    - NullPool: a migration run opens one connection and exits
    - Offline mode renders SQL with literal binds for review before applying
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

import catalog.models  # noqa: F401
from catalog.config import get_settings
from catalog.db.base import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
database_url = get_settings().database_url


def _configure(**kwargs) -> None:
    context.configure(target_metadata=target_metadata, **kwargs)
    with context.begin_transaction():
        context.run_migrations()


def run_offline() -> None:
    _configure(
        url=database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )


def _run_sync(connection: Connection) -> None:
    _configure(connection=connection)


async def run_online() -> None:
    engine = create_async_engine(database_url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_sync)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    asyncio.run(run_online())
