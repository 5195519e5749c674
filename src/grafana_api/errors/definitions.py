"""Predefined errors shared by the engine and the API layer.

Each one is a class: ``raise ErrInvalidAPIKey`` builds a new instance, so no
traceback or cause is carried over from an earlier request.
"""

from __future__ import annotations

from grafana_api.errors.app_errors import (
    AppError,
    CredentialRequiredError,
    DuplicateKeyError,
    ErrorKind,
    InvalidCredentialError,
    NotFoundError,
    ValidationError,
)

# -- Authentication --------------------------------------------------------


class ErrAPIKeyRequired(CredentialRequiredError):
    default_message = "API key is required"
    default_code = "api-key-required"


class ErrAPIKeyEmpty(CredentialRequiredError):
    default_message = "API key cannot be empty"
    default_code = "api-key-empty"


class ErrInvalidAPIKey(InvalidCredentialError):
    default_message = "Invalid API key"
    default_code = "invalid-api-key"


# -- API keys --------------------------------------------------------------


class ErrAPIKeyNameRequired(ValidationError):
    default_message = "name is required"
    default_code = "name-required"


class ErrAPIKeyHashRequired(ValidationError):
    default_message = "key is required"
    default_code = "key-required"


class ErrInvalidAPIKeyID(ValidationError):
    default_message = "invalid API key ID"
    default_code = "invalid-api-key-id"


class ErrAPIKeyNotFound(NotFoundError):
    default_message = "API key not found"
    default_code = "api-key-not-found"


class ErrAPIKeyDuplicate(DuplicateKeyError):
    default_message = "API key already exists"
    default_code = "api-key-duplicate"


# -- Users -----------------------------------------------------------------


class ErrInvalidUserID(ValidationError):
    default_message = "invalid user ID"
    default_code = "invalid-user-id"


class ErrUserNotFound(NotFoundError):
    default_message = "user not found"
    default_code = "user-not-found"


class ErrUserEmailTaken(DuplicateKeyError):
    default_message = "user with this email already exists"
    default_code = "user-email-taken"


class ErrUserEmailRequired(ValidationError):
    default_message = "email is required"
    default_code = "email-required"


class ErrUserFirstNameRequired(ValidationError):
    default_message = "first name is required"
    default_code = "first-name-required"


class ErrUserLastNameRequired(ValidationError):
    default_message = "last name is required"
    default_code = "last-name-required"


class ErrUserAgeRange(ValidationError):
    default_message = "age must be between 1 and 120"
    default_code = "age-out-of-range"


# -- Service ---------------------------------------------------------------


class ErrEngineNotReady(AppError):
    kind = ErrorKind.INTERNAL
    default_message = "service is not ready"
    default_code = "engine-not-ready"
    default_status = 503
