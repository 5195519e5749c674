"""V1 API request/response Pydantic schemas.

These are the *API-layer* schemas: thin wrappers that define the HTTP
contract. They deliberately do NOT inherit from SQLAlchemy models; the
endpoint code maps between ORM objects and these schemas.
"""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - Pydantic needs this at runtime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from grafana_api.engine.services.api_key_service import MASKED_KEY

# ---------------------------------------------------------------------------
# Generic
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Standard error body ``{"error": "...", "message": "..."}``."""

    error: str
    message: str


class HealthResponse(BaseModel):
    status: str
    message: str
    time: datetime


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserCreateRequest(BaseModel):
    """POST /api/v1/users/: create a user."""

    email: EmailStr
    first_name: str = Field(min_length=2, max_length=50)
    last_name: str = Field(min_length=2, max_length=50)
    age: int = Field(ge=1, le=120)


class UserUpdateRequest(UserCreateRequest):
    """PUT /api/v1/users/{id}: replace a user's fields."""

    active: bool = True


class UserResponse(BaseModel):
    """Serialised user for API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    first_name: str
    last_name: str
    age: int
    active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# API keys
# ---------------------------------------------------------------------------


class APIKeyCreateRequest(BaseModel):
    """POST /api/v1/api-keys/: create an API key."""

    name: str = Field(min_length=2, max_length=100)
    description: str = ""
    expires_at: datetime | None = None


class APIKeyUpdateRequest(APIKeyCreateRequest):
    """PUT /api/v1/api-keys/{id}: replace an API key's mutable fields."""

    active: bool = True


class APIKeyResponse(BaseModel):
    """Serialised API key. ``key`` is the plaintext only at creation."""

    id: int
    name: str
    key: str = MASKED_KEY
    description: str = ""
    active: bool
    expires_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_record(cls, record: Any, *, plaintext: str | None = None) -> APIKeyResponse:
        """Build a response from an ORM record, masking the key unless *plaintext* is given."""
        return cls(
            id=record.id,
            name=record.name,
            key=plaintext if plaintext is not None else MASKED_KEY,
            description=record.description or "",
            active=record.active,
            expires_at=record.expires_at,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
