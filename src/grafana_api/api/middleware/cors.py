"""CORS middleware configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi.middleware.cors import CORSMiddleware

from grafana_api.api.middleware.auth import API_KEY_HEADER

if TYPE_CHECKING:
    from fastapi import FastAPI

    from grafana_api.config.settings import CORSConfig

logger = logging.getLogger(__name__)


def setup_cors(app: FastAPI, config: CORSConfig) -> None:
    """Add CORS middleware from the CORS settings.

    The ``X-API-Key`` header is always allowed so browsers can send it in
    pre-flighted requests.
    """
    allow_headers = list(config.allow_headers)
    if API_KEY_HEADER not in allow_headers:
        allow_headers.append(API_KEY_HEADER)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allow_origins,
        allow_credentials=config.allow_credentials,
        allow_methods=config.allow_methods,
        allow_headers=allow_headers,
        expose_headers=config.expose_headers,
    )
    logger.info(
        "CORS middleware configured: allow_origins=%s allow_methods=%s",
        config.allow_origins,
        config.allow_methods,
    )
