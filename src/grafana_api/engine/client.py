"""AppEngine: owns the datastore and the user and API-key services."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from grafana_api.config.settings import AppConfig
    from grafana_api.datastore.client import Datastore
    from grafana_api.engine.services.api_key_service import APIKeyService
    from grafana_api.engine.services.user_service import UserService
    from grafana_api.metrics.collector import AppMetrics

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


def _started(component: _T | None) -> _T:
    if component is None:
        msg = "Engine not initialized. Call initialize() first."
        raise RuntimeError(msg)
    return component


class AppEngine:
    """Service registry with an explicit start/stop lifecycle.

    ``metrics`` is optional. When it is omitted the services run the same
    way and simply record nothing.
    """

    def __init__(self, config: AppConfig, *, metrics: AppMetrics | None = None) -> None:
        self._config = config
        self._metrics = metrics
        self._datastore: Datastore | None = None
        self._users: UserService | None = None
        self._api_keys: APIKeyService | None = None

    async def initialize(self) -> None:
        """Open the database, create the schema, seed the bootstrap key.

        Raises:
            RuntimeError: When called twice without :meth:`close` in between.
        """
        if self.is_initialized:
            msg = "Engine already initialized"
            raise RuntimeError(msg)

        # Deferred: the services import this module for typing.
        from grafana_api.datastore.client import Datastore
        from grafana_api.datastore.migrations import run_auto_migrate
        from grafana_api.engine.services.api_key_service import APIKeyService
        from grafana_api.engine.services.user_service import UserService

        datastore = Datastore(self._config.db)
        await datastore.open()
        self._datastore = datastore

        try:
            await run_auto_migrate(datastore.engine)
            users = UserService(self)
            api_keys = APIKeyService(self)

            auth = self._config.auth
            if auth.bootstrap_key:
                await api_keys.ensure_key(auth.bootstrap_key, auth.bootstrap_key_name)

            if self._metrics is not None:
                self._metrics.set_active_users(await users.count_users())
                self._metrics.set_api_key_count(await api_keys.repository.count())
        except Exception:
            await self.close()
            raise

        self._users = users
        self._api_keys = api_keys
        logger.info("Engine started")

    async def close(self) -> None:
        """Release the services and the database. Safe to call repeatedly."""
        self._users = None
        self._api_keys = None
        datastore, self._datastore = self._datastore, None
        if datastore is not None:
            await datastore.close()
            logger.info("Engine stopped")

    @property
    def is_initialized(self) -> bool:
        return self._api_keys is not None

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def metrics(self) -> AppMetrics | None:
        return self._metrics

    @property
    def datastore(self) -> Datastore:
        return _started(self._datastore)

    @property
    def user_service(self) -> UserService:
        return _started(self._users)

    @property
    def api_key_service(self) -> APIKeyService:
        return _started(self._api_keys)
