"""Database engine factory for PostgreSQL (asyncpg) and SQLite (aiosqlite)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from grafana_api.config.settings import DatabaseConfig


def _pool_kwargs(config: DatabaseConfig, url: str) -> dict[str, Any]:
    if url.startswith("sqlite"):
        # An in-memory database lives as long as its single connection.
        if ":memory:" in url:
            return {"poolclass": StaticPool}
        return {}
    return {
        "pool_size": config.max_idle_connections,
        "max_overflow": max(config.max_open_connections - config.max_idle_connections, 0),
        "pool_pre_ping": True,
    }


def create_engine(config: DatabaseConfig) -> AsyncEngine:
    """Create an async SQLAlchemy engine from the database settings."""
    url = config.url
    return create_async_engine(url, echo=config.debug_sql, **_pool_kwargs(config, url))
