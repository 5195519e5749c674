"""Error types and error kinds."""

from grafana_api.errors.app_errors import (
    AppError,
    CredentialRequiredError,
    DuplicateKeyError,
    ErrorKind,
    InvalidCredentialError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "AppError",
    "CredentialRequiredError",
    "DuplicateKeyError",
    "ErrorKind",
    "InvalidCredentialError",
    "NotFoundError",
    "ValidationError",
]
