"""Async SQLAlchemy datastore shared by the repositories.

Each repository call opens its own short-lived session from the factory
held here.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from grafana_api.datastore.engines import create_engine

if TYPE_CHECKING:
    from sqlalchemy.orm import DeclarativeBase

    from grafana_api.config.settings import DatabaseConfig

logger = logging.getLogger(__name__)

_ERR_NOT_OPEN = "Datastore is not open. Call open() first."


class Datastore:
    """Owns the engine and session factory for one database.

    Usage::

        ds = Datastore(config.db)
        await ds.open()
        async with ds.session() as session:
            ...
        await ds.close()
    """

    def __init__(self, config: DatabaseConfig) -> None:
        self._config = config
        self._engine: AsyncEngine | None = None
        self._sessions: async_sessionmaker[AsyncSession] | None = None

    async def open(self, *, base: type[DeclarativeBase] | None = None) -> None:
        """Connect, and create the tables of *base* when given."""
        engine = create_engine(self._config)
        self._engine = engine
        # Rows stay readable after commit; repositories return them detached.
        self._sessions = async_sessionmaker(engine, expire_on_commit=False)
        if base is not None:
            async with engine.begin() as conn:
                await conn.run_sync(base.metadata.create_all)
        logger.info("Datastore opened: engine=%s", self._config.engine)

    async def close(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessions = None
        logger.info("Datastore closed")

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError(_ERR_NOT_OPEN)
        return self._engine

    def session(self) -> AsyncSession:
        """Return a new session; use it as an async context manager."""
        if self._sessions is None:
            raise RuntimeError(_ERR_NOT_OPEN)
        return self._sessions()
