"""FastAPI dependency injection helpers.

Provides ``Depends()``-compatible callables for engine access and
API key authentication in route handlers.

Usage in a route::

    @router.post("/users/")
    async def create_user(
        ctx: APIKeyContext = Depends(require_api_key),
        engine: AppEngine = Depends(get_engine),
    ) -> ...:
        ...
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader

from grafana_api.api.middleware.auth import (
    API_KEY_HEADER,
    APIKeyContext,
    authenticate_api_key,
)
from grafana_api.engine.client import AppEngine  # noqa: TC001
from grafana_api.errors.definitions import ErrEngineNotReady

# Declares the ``X-API-Key`` security scheme in the OpenAPI document.
# ``auto_error=False`` leaves the 401 response to the gate.
api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)

# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


def get_engine(request: Request) -> AppEngine:
    """Retrieve the engine from ``app.state``.

    The engine is stored on ``app.state.engine`` during lifespan startup.

    Raises:
        AppError: 503 if the engine is not initialized.
    """
    engine: AppEngine | None = getattr(request.app.state, "engine", None)
    if engine is None:
        raise ErrEngineNotReady
    return engine


# ---------------------------------------------------------------------------
# Auth context
# ---------------------------------------------------------------------------


async def require_api_key(
    request: Request,
    engine: Annotated[AppEngine, Depends(get_engine)],
    x_api_key: Annotated[str | None, Depends(api_key_header)],
) -> APIKeyContext:
    """Dependency that requires a valid ``X-API-Key`` header."""
    return await authenticate_api_key(engine, x_api_key, path=request.url.path)
