"""API middleware: auth, CORS, request logging."""

from grafana_api.api.middleware.auth import APIKeyContext
from grafana_api.api.middleware.cors import setup_cors
from grafana_api.api.middleware.request_logging import RequestLoggingMiddleware

__all__ = ["APIKeyContext", "RequestLoggingMiddleware", "setup_cors"]
