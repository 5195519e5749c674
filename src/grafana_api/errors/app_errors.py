"""AppError: base exception class and typed error kinds."""

from __future__ import annotations

import enum


class ErrorKind(enum.StrEnum):
    """Classification of an error, inspected by the HTTP layer."""

    VALIDATION = "validation"
    DUPLICATE = "duplicate"
    NOT_FOUND = "not-found"
    CREDENTIAL_REQUIRED = "credential-required"
    INVALID_CREDENTIAL = "invalid-credential"
    INTERNAL = "internal"


# Status code chosen for each kind when none is given explicitly.
KIND_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.DUPLICATE: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CREDENTIAL_REQUIRED: 401,
    ErrorKind.INVALID_CREDENTIAL: 401,
    ErrorKind.INTERNAL: 500,
}


class AppError(Exception):
    """Base error for all service operations.

    Attributes:
        message: Human-readable error description.
        kind: Error classification.
        status_code: Suggested HTTP status code (derived from *kind*).
        code: Machine-readable error code string.
        title: Optional ``error`` field for the HTTP body, overriding the
            per-kind default.
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    # Defaults used by the predefined errors in ``definitions``.
    default_message: str = "internal error"
    default_code: str | None = None
    default_status: int | None = None

    def __init__(
        self,
        message: str | None = None,
        *,
        kind: ErrorKind | None = None,
        status_code: int | None = None,
        code: str | None = None,
        title: str | None = None,
    ) -> None:
        if kind is not None:
            self.kind = kind
        self.message = message if message is not None else self.default_message
        super().__init__(self.message)
        if status_code is None:
            status_code = self.default_status or KIND_STATUS[self.kind]
        self.status_code = status_code
        self.code = code or self.default_code or str(self.kind)
        self.title = title


class ValidationError(AppError):
    """Bad input shape (empty name, zero id, ...)."""

    kind = ErrorKind.VALIDATION


class DuplicateKeyError(AppError):
    """A unique value (key hash, email) is already taken."""

    kind = ErrorKind.DUPLICATE


class NotFoundError(AppError):
    """Unknown or logically deleted record."""

    kind = ErrorKind.NOT_FOUND


class CredentialRequiredError(AppError):
    """No credential was presented."""

    kind = ErrorKind.CREDENTIAL_REQUIRED


class InvalidCredentialError(AppError):
    """The presented credential is unknown, inactive or expired."""

    kind = ErrorKind.INVALID_CREDENTIAL
