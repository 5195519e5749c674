"""V1 user endpoints.

Listing and reading are public; writes require an API key.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response

from grafana_api.api.dependencies import get_engine, require_api_key
from grafana_api.api.middleware.auth import APIKeyContext  # noqa: TC001
from grafana_api.api.v1._ids import parse_id
from grafana_api.api.v1.schemas import UserCreateRequest, UserResponse, UserUpdateRequest
from grafana_api.engine.client import AppEngine  # noqa: TC001

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def _user_id(raw: str) -> int:
    return parse_id(
        raw,
        title="Invalid user ID",
        message="User ID must be a valid integer",
        code="invalid-user-id",
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get("/", response_model=list[UserResponse])
async def list_users(
    engine: Annotated[AppEngine, Depends(get_engine)],
) -> list[UserResponse]:
    """List all users."""
    users = await engine.user_service.list_users()
    logger.info("Users retrieved: count=%d", len(users))
    return [UserResponse.model_validate(u) for u in users]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    engine: Annotated[AppEngine, Depends(get_engine)],
) -> UserResponse:
    """Get a user by ID."""
    user = await engine.user_service.get_user(_user_id(user_id))
    return UserResponse.model_validate(user)


@router.post("/", status_code=201, response_model=UserResponse)
async def create_user(
    body: UserCreateRequest,
    ctx: Annotated[APIKeyContext, Depends(require_api_key)],
    engine: Annotated[AppEngine, Depends(get_engine)],
) -> UserResponse:
    """Create a new user."""
    user = await engine.user_service.create_user(
        str(body.email), body.first_name, body.last_name, body.age
    )
    logger.info("User created: id=%s by api_key_id=%s", user.id, ctx.api_key_id)
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    body: UserUpdateRequest,
    ctx: Annotated[APIKeyContext, Depends(require_api_key)],
    engine: Annotated[AppEngine, Depends(get_engine)],
) -> UserResponse:
    """Replace a user's fields."""
    user = await engine.user_service.update_user(
        _user_id(user_id),
        email=str(body.email),
        first_name=body.first_name,
        last_name=body.last_name,
        age=body.age,
        active=body.active,
    )
    logger.info("User updated: id=%s by api_key_id=%s", user.id, ctx.api_key_id)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    ctx: Annotated[APIKeyContext, Depends(require_api_key)],
    engine: Annotated[AppEngine, Depends(get_engine)],
) -> Response:
    """Delete a user."""
    uid = _user_id(user_id)
    await engine.user_service.delete_user(uid)
    logger.info("User deleted: id=%s by api_key_id=%s", uid, ctx.api_key_id)
    return Response(status_code=204)
