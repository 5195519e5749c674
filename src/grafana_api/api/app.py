"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from grafana_api import __version__
from grafana_api.api.middleware.cors import setup_cors
from grafana_api.api.middleware.request_logging import RequestLoggingMiddleware
from grafana_api.api.v1 import v1_router
from grafana_api.config.settings import AppConfig
from grafana_api.engine.client import AppEngine
from grafana_api.errors.app_errors import AppError, ErrorKind
from grafana_api.metrics.collector import AppMetrics
from grafana_api.metrics.middleware import PrometheusMiddleware

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)

# ``error`` field of the JSON error body for each error kind.
ERROR_TITLES: dict[ErrorKind, str] = {
    ErrorKind.VALIDATION: "Bad Request",
    ErrorKind.DUPLICATE: "Conflict",
    ErrorKind.NOT_FOUND: "Not Found",
    ErrorKind.CREDENTIAL_REQUIRED: "Unauthorized",
    ErrorKind.INVALID_CREDENTIAL: "Unauthorized",
    ErrorKind.INTERNAL: "Internal Server Error",
}


def error_body(title: str, message: str) -> dict[str, str]:
    return {"error": title, "message": message}


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run the engine for as long as the server is up."""
    config: AppConfig = app.state.config
    engine = AppEngine(config, metrics=app.state.metrics)
    try:
        await engine.initialize()
        app.state.engine = engine
        logger.info("Engine initialized: %s", config.log_summary())
        yield
    finally:
        await engine.close()
        logger.info("Engine shut down")


def _describe(exc: RequestValidationError) -> str:
    """Flatten pydantic errors into ``loc: msg`` pairs."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg', '')}" if loc else str(err.get("msg", "")))
    return "; ".join(parts)


def _install_error_handlers(app: FastAPI) -> None:
    """Render every failure as ``{"error": ..., "message": ...}``."""

    async def on_app_error(request: Request, exc: AppError) -> JSONResponse:
        title = exc.title or ERROR_TITLES[exc.kind]
        return JSONResponse(status_code=exc.status_code, content=error_body(title, exc.message))

    async def on_bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        body = error_body("Invalid request body", _describe(exc))
        return JSONResponse(status_code=400, content=body)

    async def on_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        body = error_body("Internal Server Error", "internal error")
        return JSONResponse(status_code=500, content=body)

    app.add_exception_handler(AppError, on_app_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, on_bad_request)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, on_unexpected)


def create_app(*, config: AppConfig | None = None) -> FastAPI:
    """Assemble the service.

    Middleware order, outermost first: request logging, Prometheus
    instrumentation (when enabled), CORS. Every route lives under ``/api/v1``.
    """
    config = config or AppConfig()

    app = FastAPI(
        title="py-grafana-api",
        version=__version__,
        description="User and API key management service with Prometheus monitoring",
        lifespan=_lifespan,
    )
    app.state.config = config
    app.state.metrics = AppMetrics()

    setup_cors(app, config.cors)
    if config.metrics.enabled:
        app.add_middleware(PrometheusMiddleware, registry=app.state.metrics.registry)
    app.add_middleware(RequestLoggingMiddleware)

    _install_error_handlers(app)
    app.include_router(v1_router)
    return app
