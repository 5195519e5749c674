"""Schema bootstrap from the ORM metadata.

Used on startup and in tests. Production databases are migrated with the
Alembic environment under ``alembic/``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from grafana_api.engine.models import ALL_MODELS, Base

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


async def run_auto_migrate(engine: AsyncEngine) -> None:
    """Create any missing tables for :data:`ALL_MODELS`."""
    tables = [model.__table__ for model in ALL_MODELS]
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, tables=tables)


async def drop_all_tables(engine: AsyncEngine) -> None:
    """Drop every model table. Destroys data; dev and test use only."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
