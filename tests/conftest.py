"""Shared test fixtures for py-grafana-api test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from grafana_api.config.settings import AuthConfig, DatabaseEngine

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from fastapi.testclient import TestClient

    from grafana_api.engine.client import AppEngine

BOOTSTRAP_KEY = "sk-" + "a" * 64


@pytest.fixture
def app_config():
    """Provide a test AppConfig backed by in-memory SQLite."""
    from grafana_api.config.settings import AppConfig, DatabaseConfig

    return AppConfig(
        debug=True,
        db=DatabaseConfig(
            engine=DatabaseEngine.SQLITE,
            dsn="sqlite+aiosqlite:///:memory:",
        ),
    )


@pytest.fixture
def metrics():
    """Provide an AppMetrics bound to a private registry."""
    from grafana_api.metrics.collector import AppMetrics

    return AppMetrics()


@pytest.fixture
async def engine(app_config, metrics) -> AsyncIterator[AppEngine]:
    """Provide an initialized engine with an empty database."""
    from grafana_api.engine.client import AppEngine

    eng = AppEngine(app_config, metrics=metrics)
    await eng.initialize()
    yield eng
    await eng.close()


@pytest.fixture
def api_config(app_config):
    """AppConfig that seeds :data:`BOOTSTRAP_KEY` on startup."""
    app_config.auth = AuthConfig(bootstrap_key=BOOTSTRAP_KEY)
    return app_config


@pytest.fixture
def client(api_config) -> Iterator[TestClient]:
    """Provide a TestClient with the lifespan (engine, bootstrap key) running."""
    from fastapi.testclient import TestClient

    from grafana_api.api.app import create_app

    app = create_app(config=api_config)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"X-API-Key": BOOTSTRAP_KEY}


@pytest.fixture
def bootstrap_key() -> str:
    return BOOTSTRAP_KEY
