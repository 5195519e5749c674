"""API key service: key lifecycle and the validation decision."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from grafana_api.engine.models.api_key import APIKey, as_utc
from grafana_api.engine.repository.api_keys import APIKeyRepository
from grafana_api.errors.app_errors import NotFoundError
from grafana_api.errors.definitions import (
    ErrAPIKeyNameRequired,
    ErrAPIKeyRequired,
    ErrInvalidAPIKey,
    ErrInvalidAPIKeyID,
)
from grafana_api.metrics.collector import (
    VALIDATION_INVALID,
    VALIDATION_MISSING,
    VALIDATION_SUCCESS,
)
from grafana_api.utils.crypto import generate_api_key, hash_api_key

if TYPE_CHECKING:
    from collections.abc import Callable

    from grafana_api.engine.client import AppEngine

logger = logging.getLogger(__name__)

MASKED_KEY = "***"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _normalize(expires_at: datetime | None) -> datetime | None:
    return as_utc(expires_at) if expires_at is not None else None


class APIKeyService:
    """Business logic for API key management and authentication.

    - Generate a fresh secret per key (plaintext returned once, hash stored)
    - Read, update and soft-delete keys by ID
    - Decide whether a presented plaintext key currently grants access
    """

    def __init__(
        self,
        engine: AppEngine,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._engine = engine
        self._repo = APIKeyRepository(engine.datastore)
        self._clock = clock

    @property
    def repository(self) -> APIKeyRepository:
        return self._repo

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def create_key(
        self,
        name: str,
        description: str = "",
        expires_at: datetime | None = None,
    ) -> tuple[APIKey, str]:
        """Create a new API key.

        Returns:
            Tuple of (persisted APIKey, plaintext key). The plaintext is
            returned ONLY here and cannot be recovered afterwards.

        Raises:
            ValidationError: If *name* is empty.
            DuplicateKeyError: If the generated hash is already stored.
        """
        if not name:
            raise ErrAPIKeyNameRequired

        plaintext = generate_api_key()
        api_key = APIKey(
            name=name,
            key=hash_api_key(plaintext),
            description=description or "",
            active=True,
            expires_at=_normalize(expires_at),
        )
        api_key = await self._repo.create(api_key)
        await self._refresh_count()

        logger.info("API key created: id=%s name=%s", api_key.id, api_key.name)
        return api_key, plaintext

    async def get_key(self, id_: int) -> APIKey:
        """Get an API key by ID.

        Raises:
            ValidationError: If *id_* is zero.
            NotFoundError: If the key does not exist.
        """
        if not id_:
            raise ErrInvalidAPIKeyID
        return await self._repo.get_by_id(id_)

    async def list_keys(self) -> list[APIKey]:
        """List all non-deleted API keys."""
        return await self._repo.list_all()

    async def update_key(
        self,
        id_: int,
        *,
        name: str,
        description: str = "",
        active: bool = True,
        expires_at: datetime | None = None,
    ) -> APIKey:
        """Replace the mutable fields of an API key.

        The secret itself never changes.

        Raises:
            ValidationError: If *id_* is zero or *name* is empty.
            NotFoundError: If the key does not exist.
        """
        if not id_:
            raise ErrInvalidAPIKeyID
        if not name:
            raise ErrAPIKeyNameRequired

        existing = await self._repo.get_by_id(id_)
        existing.name = name
        existing.description = description or ""
        existing.active = active
        existing.expires_at = _normalize(expires_at)
        updated = await self._repo.update(existing)

        logger.info("API key updated: id=%s active=%s", updated.id, updated.active)
        return updated

    async def delete_key(self, id_: int) -> None:
        """Soft-delete an API key.

        Raises:
            ValidationError: If *id_* is zero.
            NotFoundError: If the key does not exist.
        """
        if not id_:
            raise ErrInvalidAPIKeyID
        await self._repo.delete(id_)
        await self._refresh_count()
        logger.info("API key deleted: id=%s", id_)

    async def ensure_key(self, plaintext: str, name: str) -> APIKey | None:
        """Store *plaintext* as an active key unless its hash is already known.

        Used to seed a configured bootstrap key. Returns the new record, or
        None if nothing was stored.
        """
        key_hash = hash_api_key(plaintext)
        if await self._repo.exists_by_hash(key_hash):
            return None
        api_key = await self._repo.create(APIKey(name=name, key=key_hash, active=True))
        await self._refresh_count()
        logger.info("Bootstrap API key seeded: id=%s name=%s", api_key.id, api_key.name)
        return api_key

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def validate(self, presented: str) -> APIKey:
        """Return the stored record if *presented* currently grants access.

        Unknown, inactive and expired keys all raise the same error so a
        caller cannot tell which case occurred.

        Raises:
            CredentialRequiredError: If *presented* is empty.
            InvalidCredentialError: If the key is unknown, inactive or expired.
        """
        if not presented:
            self._record(VALIDATION_MISSING)
            raise ErrAPIKeyRequired

        try:
            api_key = await self._repo.get_by_hash(hash_api_key(presented))
        except NotFoundError:
            self._record(VALIDATION_INVALID)
            raise ErrInvalidAPIKey from None

        if not api_key.is_valid(self._clock()):
            self._record(VALIDATION_INVALID)
            raise ErrInvalidAPIKey

        self._record(VALIDATION_SUCCESS)
        return api_key

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _record(self, result: str) -> None:
        metrics = self._engine.metrics
        if metrics is not None:
            metrics.record_api_key_validation(result)

    async def _refresh_count(self) -> None:
        metrics = self._engine.metrics
        if metrics is not None:
            metrics.set_api_key_count(await self._repo.count())
