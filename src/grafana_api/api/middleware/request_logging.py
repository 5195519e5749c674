"""Request logging middleware: one log line per HTTP request."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware

if TYPE_CHECKING:
    from collections.abc import Callable

    from starlette.requests import Request
    from starlette.responses import Response

logger = logging.getLogger("grafana_api.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, client, user agent, status and latency."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:  # type: ignore[type-arg]
        start = time.monotonic()
        try:
            response: Response = await call_next(request)
        except Exception:
            # Rendered as a 500 further out, by the server error handler.
            self._log(request, 500, start)
            raise
        self._log(request, response.status_code, start)
        return response

    @staticmethod
    def _log(request: Request, status_code: int, start: float) -> None:
        latency_ms = (time.monotonic() - start) * 1000
        logger.info(
            "HTTP Request method=%s path=%s client_ip=%s user_agent=%s status_code=%d latency_ms=%.2f",
            request.method,
            request.url.path,
            request.client.host if request.client else "",
            request.headers.get("user-agent", ""),
            status_code,
            latency_ms,
        )
