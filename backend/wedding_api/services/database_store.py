"""
Wedding Gallery Backend — Durable Blessing Store
==================================================

What:  BlessingStore backed by the `blessings` table through async SQLAlchemy.
When:  BLESSING_STORE=database.
How:   Owns its engine and session factory. Each operation runs in its own
       session (commit on success, rollback on error). Any failure, from a
       refused connection to a constraint violation, is logged with its
       cause and re-raised as StoreUnavailableError.

Query plan (list_all):
    SELECT * FROM blessings ORDER BY timestamp DESC, id DESC
    → idx_blessings_timestamp; result sets are small, no LIMIT
"""

import logging
from typing import List

from sqlalchemy import desc, select, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from wedding_api.config import Settings
from wedding_api.database import (
    Base,
    create_engine_from_settings,
    create_session_factory,
    session_scope,
)
from wedding_api.exceptions import StoreUnavailableError
from wedding_api.models.blessing import Blessing
from wedding_api.schemas.blessing import BlessingResponse
from wedding_api.services.blessing_store import BlessingStore

logger = logging.getLogger(__name__)


class DatabaseBlessingStore(BlessingStore):
    """
    Durable blessings.

    Args:
        engine: Async engine for the blessings database.
        create_tables: Run `CREATE TABLE IF NOT EXISTS` at startup instead of
            relying on Alembic (development and tests).
    """

    backend = "database"

    def __init__(self, engine: AsyncEngine, create_tables: bool = False):
        self.engine = engine
        self.create_tables = create_tables
        self._session_factory: async_sessionmaker[AsyncSession] = create_session_factory(engine)

    @classmethod
    def from_settings(cls, settings: Settings) -> "DatabaseBlessingStore":
        return cls(
            engine=create_engine_from_settings(settings),
            create_tables=settings.db_create_tables,
        )

    async def startup(self) -> None:
        if not self.create_tables:
            return
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Blessings table ensured on %s", self.engine.url.render_as_string(hide_password=True))

    async def close(self) -> None:
        await self.engine.dispose()

    async def append(self, name: str, message: str) -> BlessingResponse:
        try:
            async with session_scope(self._session_factory) as session:
                row = Blessing(name=name, message=message)
                session.add(row)
                # Flush assigns the id and the Python-side timestamp default
                await session.flush()
                blessing = BlessingResponse.model_validate(row)
        except Exception as e:
            logger.error("Database error saving blessing: %s", str(e), exc_info=True)
            raise StoreUnavailableError(
                message="Failed to save blessing",
                context={"error_type": type(e).__name__},
            )

        logger.info("Blessing %d stored (from %s)", blessing.id, name)
        return blessing

    async def list_all(self) -> List[BlessingResponse]:
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(
                    select(Blessing).order_by(desc(Blessing.timestamp), desc(Blessing.id))
                )
                rows = list(result.scalars().all())
                return [BlessingResponse.model_validate(row) for row in rows]
        except Exception as e:
            logger.error("Database error listing blessings: %s", str(e), exc_info=True)
            raise StoreUnavailableError(
                message="Failed to fetch blessings",
                context={"error_type": type(e).__name__},
            )

    async def health_check(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Health check: database unreachable: %s", str(e))
            return False
