"""API key repository: the key store.

All lookups exclude logically deleted rows. ``get_by_hash`` runs on every
authenticated request and is served by the unique index on ``key``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from grafana_api.engine.models.api_key import APIKey
from grafana_api.errors.definitions import (
    ErrAPIKeyDuplicate,
    ErrAPIKeyHashRequired,
    ErrAPIKeyNameRequired,
    ErrAPIKeyNotFound,
    ErrInvalidAPIKeyID,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from grafana_api.datastore.client import Datastore

# Fields an update may write. The hash is immutable after creation.
MUTABLE_FIELDS = ("name", "description", "active", "expires_at")


class APIKeyRepository:
    """Data access layer for API keys."""

    def __init__(self, datastore: Datastore) -> None:
        self._ds = datastore

    async def create(self, api_key: APIKey) -> APIKey:
        """Persist a new API key.

        Raises:
            ValidationError: If name or hash is empty.
            DuplicateKeyError: If a record with the same hash exists.
        """
        if not api_key.name:
            raise ErrAPIKeyNameRequired
        if not api_key.key:
            raise ErrAPIKeyHashRequired

        if await self.exists_by_hash(api_key.key):
            raise ErrAPIKeyDuplicate

        async with self._ds.session() as session:
            session.add(api_key)
            try:
                await session.commit()
            except IntegrityError as exc:
                # Lost a race with a concurrent insert of the same hash.
                await session.rollback()
                raise ErrAPIKeyDuplicate from exc
            await session.refresh(api_key)
        return api_key

    async def get_by_id(self, id_: int) -> APIKey:
        """Find a non-deleted API key by primary key.

        Raises:
            ValidationError: If *id_* is zero.
            NotFoundError: If no such key exists.
        """
        if not id_:
            raise ErrInvalidAPIKeyID
        async with self._ds.session() as session:
            api_key = await self._load(session, id_)
        if api_key is None:
            raise ErrAPIKeyNotFound
        return api_key

    async def get_by_hash(self, key_hash: str) -> APIKey:
        """Find a non-deleted API key by its stored hash.

        Raises:
            ValidationError: If *key_hash* is empty.
            NotFoundError: If no key matches.
        """
        if not key_hash:
            raise ErrAPIKeyHashRequired
        async with self._ds.session() as session:
            result = await session.execute(
                select(APIKey).where(APIKey.key == key_hash, APIKey.deleted_at.is_(None))
            )
            api_key = result.scalar_one_or_none()
        if api_key is None:
            raise ErrAPIKeyNotFound
        return api_key

    async def list_all(self) -> list[APIKey]:
        """List all non-deleted API keys ordered by ID."""
        async with self._ds.session() as session:
            result = await session.execute(
                select(APIKey).where(APIKey.deleted_at.is_(None)).order_by(APIKey.id)
            )
            return list(result.scalars().all())

    async def update(self, api_key: APIKey) -> APIKey:
        """Write the mutable fields of *api_key* to its stored row.

        Returns the refreshed stored record.

        Raises:
            ValidationError: If the ID is zero or the name is empty.
            NotFoundError: If the key does not exist.
        """
        if not api_key.id:
            raise ErrInvalidAPIKeyID
        if not api_key.name:
            raise ErrAPIKeyNameRequired

        async with self._ds.session() as session:
            existing = await self._load(session, api_key.id)
            if existing is None:
                raise ErrAPIKeyNotFound
            for field in MUTABLE_FIELDS:
                setattr(existing, field, getattr(api_key, field))
            await session.commit()
            await session.refresh(existing)
        return existing

    async def delete(self, id_: int) -> None:
        """Soft-delete an API key.

        Raises:
            ValidationError: If *id_* is zero.
            NotFoundError: If the key does not exist.
        """
        if not id_:
            raise ErrInvalidAPIKeyID
        async with self._ds.session() as session:
            existing = await self._load(session, id_)
            if existing is None:
                raise ErrAPIKeyNotFound
            existing.deleted_at = datetime.now(UTC)
            await session.commit()

    async def exists_by_hash(self, key_hash: str) -> bool:
        """Return True if any row (deleted or not) holds *key_hash*."""
        if not key_hash:
            return False
        async with self._ds.session() as session:
            result = await session.execute(
                select(func.count(APIKey.id)).where(APIKey.key == key_hash)
            )
            return result.scalar_one() > 0

    async def count(self) -> int:
        """Count non-deleted API keys."""
        async with self._ds.session() as session:
            result = await session.execute(
                select(func.count(APIKey.id)).where(APIKey.deleted_at.is_(None))
            )
            return result.scalar_one()

    @staticmethod
    async def _load(session: AsyncSession, id_: int) -> APIKey | None:
        result = await session.execute(
            select(APIKey).where(APIKey.id == id_, APIKey.deleted_at.is_(None))
        )
        return result.scalar_one_or_none()
