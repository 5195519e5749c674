"""Prometheus HTTP request metrics middleware for FastAPI.

Tracks:
- ``http_requests_total`` (counter): requests by method, endpoint, status
- ``http_request_duration_seconds`` (histogram): duration by method, endpoint
- ``http_requests_in_flight`` (gauge): requests being processed
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from prometheus_client import Counter, Gauge, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

if TYPE_CHECKING:
    from collections.abc import Callable

    from prometheus_client import CollectorRegistry
    from starlette.requests import Request
    from starlette.responses import Response

logger = logging.getLogger(__name__)

_LABELS = ("method", "endpoint", "status")
_ENDPOINT_LABELS = ("method", "endpoint")


def _endpoint(request: Request) -> str:
    """Return the matched route template, falling back to the raw path."""
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", request.url.path)
    return request.url.path


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Starlette middleware that records request count, duration and in-flight."""

    def __init__(self, app: object, *, registry: CollectorRegistry) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._request_count = Counter(
            "http_requests_total",
            "Total number of HTTP requests",
            _LABELS,
            registry=registry,
        )
        self._request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            _ENDPOINT_LABELS,
            registry=registry,
        )
        self._in_flight = Gauge(
            "http_requests_in_flight",
            "Current number of HTTP requests being processed",
            _ENDPOINT_LABELS,
            registry=registry,
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:  # type: ignore[type-arg]
        """Wrap each request with timing and counting."""
        method = request.method
        endpoint = _endpoint(request)
        in_flight = self._in_flight.labels(method=method, endpoint=endpoint)
        start = time.monotonic()

        in_flight.inc()
        try:
            response: Response = await call_next(request)
        except Exception:
            # Counted as the 500 the server error handler will send.
            self._record(method, endpoint, "500", start)
            raise
        finally:
            in_flight.dec()

        self._record(method, endpoint, str(response.status_code), start)
        return response

    def _record(self, method: str, endpoint: str, status: str, start: float) -> None:
        duration = time.monotonic() - start
        self._request_duration.labels(method=method, endpoint=endpoint).observe(duration)
        self._request_count.labels(method=method, endpoint=endpoint, status=status).inc()
        logger.debug(
            "Request metrics recorded: %s %s %s %.6fs", method, endpoint, status, duration
        )
