"""API key authentication gate.

- Reads the ``X-API-Key`` header
- Trims whitespace and an optional ``Bearer `` prefix
- Asks the API key service to validate the key
- Resolves an :class:`APIKeyContext` for downstream handlers
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from grafana_api.errors.app_errors import AppError
from grafana_api.errors.definitions import ErrAPIKeyEmpty, ErrAPIKeyRequired, ErrInvalidAPIKey

if TYPE_CHECKING:
    from grafana_api.engine.client import AppEngine

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

API_KEY_HEADER = "X-API-Key"
BEARER_PREFIX = "Bearer "


# ---------------------------------------------------------------------------
# APIKeyContext: resolved identity handed to route handlers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class APIKeyContext:
    """Identity of the API key that authenticated the current request."""

    api_key_id: int
    api_key_name: str


# ---------------------------------------------------------------------------
# Authentication logic
# ---------------------------------------------------------------------------


def clean_api_key(raw: str) -> str:
    """Strip surrounding whitespace and a leading ``Bearer `` prefix."""
    key = raw.strip()
    if key.startswith(BEARER_PREFIX):
        key = key.removeprefix(BEARER_PREFIX).strip()
    return key


async def authenticate_api_key(
    engine: AppEngine,
    header_value: str | None,
    *,
    path: str = "",
) -> APIKeyContext:
    """Authenticate a request from its ``X-API-Key`` header value.

    Args:
        engine: The application engine.
        header_value: Raw header value, or None if the header is absent.
        path: Request path, used for logging only.

    Returns:
        APIKeyContext for the validated key.

    Raises:
        CredentialRequiredError: If the header is absent or empty.
        InvalidCredentialError: If the key is unknown, inactive or expired.
    """
    if not header_value:
        logger.warning("Missing API key header: path=%s", path)
        raise ErrAPIKeyRequired

    api_key = clean_api_key(header_value)
    if not api_key:
        logger.warning("Empty API key provided: path=%s", path)
        raise ErrAPIKeyEmpty

    try:
        record = await engine.api_key_service.validate(api_key)
    except AppError as exc:
        logger.warning("Invalid API key provided: path=%s error=%s", path, exc.code)
        raise ErrInvalidAPIKey from None

    logger.debug(
        "API key validated: api_key_id=%s api_key_name=%s path=%s",
        record.id,
        record.name,
        path,
    )
    return APIKeyContext(api_key_id=record.id, api_key_name=record.name)
