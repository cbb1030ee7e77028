"""
Wedding Gallery Backend — Database Engine & Session Helpers
=============================================================

What:  Async SQLAlchemy engine/session factories and the declarative Base.
How:   `create_engine_from_settings()` builds an engine for DATABASE_URL;
       `create_session_factory()` wraps it. The durable blessing store owns
       both, so nothing here is created at import time and the in-memory
       deployment never opens a database connection.
Who:   Used by DatabaseBlessingStore and by Alembic (for `Base.metadata`).

Connection Strategy:
    PostgreSQL (asyncpg) in production, SQLite (aiosqlite) in tests.
    Pool sizing arguments are only passed for server databases; SQLite's
    async driver uses a static pool that rejects them.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from wedding_api.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class so Alembic sees a single
    `Base.metadata` when generating or applying migrations.
    """
    pass


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """
    Build the async engine for the configured database URL.

    Echoes SQL only when LOG_LEVEL=DEBUG.
    """
    url = make_url(settings.database_url)
    kwargs = {"echo": settings.log_level == "DEBUG"}
    if not url.get_backend_name().startswith("sqlite"):
        kwargs["pool_pre_ping"] = settings.db_pool_pre_ping
        kwargs["pool_recycle"] = 3600
    return create_async_engine(url, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: returned ORM rows stay readable after commit
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a transactional session for one store operation.

    How it works:
        1. Opens a new session from the factory
        2. Yields it to the caller
        3. On success: commits
        4. On error: rolls back and re-raises
        5. Always: closes the session (returns connection to pool)
    """
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
