"""V1 API key endpoints.

Every route requires an API key. The plaintext key appears only in the
creation response; all other responses mask it.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response

from grafana_api.api.dependencies import get_engine, require_api_key
from grafana_api.api.middleware.auth import APIKeyContext  # noqa: TC001
from grafana_api.api.v1._ids import parse_id
from grafana_api.api.v1.schemas import APIKeyCreateRequest, APIKeyResponse, APIKeyUpdateRequest
from grafana_api.engine.client import AppEngine  # noqa: TC001

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api-keys", tags=["api-keys"])


def _key_id(raw: str) -> int:
    return parse_id(
        raw,
        title="Invalid API key ID",
        message="API key ID must be a valid integer",
        code="invalid-api-key-id",
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.post("/", status_code=201, response_model=APIKeyResponse)
async def create_api_key(
    body: APIKeyCreateRequest,
    ctx: Annotated[APIKeyContext, Depends(require_api_key)],
    engine: Annotated[AppEngine, Depends(get_engine)],
) -> APIKeyResponse:
    """Create a new API key. The response carries the plaintext key once."""
    record, plaintext = await engine.api_key_service.create_key(
        body.name, body.description, body.expires_at
    )
    logger.info("API key created: id=%s by api_key_id=%s", record.id, ctx.api_key_id)
    return APIKeyResponse.from_record(record, plaintext=plaintext)


@router.get("/", response_model=list[APIKeyResponse])
async def list_api_keys(
    _ctx: Annotated[APIKeyContext, Depends(require_api_key)],
    engine: Annotated[AppEngine, Depends(get_engine)],
) -> list[APIKeyResponse]:
    """List all API keys."""
    records = await engine.api_key_service.list_keys()
    logger.info("API keys retrieved: count=%d", len(records))
    return [APIKeyResponse.from_record(r) for r in records]


@router.get("/{key_id}", response_model=APIKeyResponse)
async def get_api_key(
    key_id: str,
    _ctx: Annotated[APIKeyContext, Depends(require_api_key)],
    engine: Annotated[AppEngine, Depends(get_engine)],
) -> APIKeyResponse:
    """Get an API key by ID."""
    record = await engine.api_key_service.get_key(_key_id(key_id))
    return APIKeyResponse.from_record(record)


@router.put("/{key_id}", response_model=APIKeyResponse)
async def update_api_key(
    key_id: str,
    body: APIKeyUpdateRequest,
    ctx: Annotated[APIKeyContext, Depends(require_api_key)],
    engine: Annotated[AppEngine, Depends(get_engine)],
) -> APIKeyResponse:
    """Update an API key's name, description, active flag and expiry."""
    record = await engine.api_key_service.update_key(
        _key_id(key_id),
        name=body.name,
        description=body.description,
        active=body.active,
        expires_at=body.expires_at,
    )
    logger.info("API key updated: id=%s by api_key_id=%s", record.id, ctx.api_key_id)
    return APIKeyResponse.from_record(record)


@router.delete("/{key_id}", status_code=204)
async def delete_api_key(
    key_id: str,
    ctx: Annotated[APIKeyContext, Depends(require_api_key)],
    engine: Annotated[AppEngine, Depends(get_engine)],
) -> Response:
    """Delete an API key."""
    kid = _key_id(key_id)
    await engine.api_key_service.delete_key(kid)
    logger.info("API key deleted: id=%s by api_key_id=%s", kid, ctx.api_key_id)
    return Response(status_code=204)
