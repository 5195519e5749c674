"""Tests for the API key gate: header cleaning and authenticate_api_key."""

from __future__ import annotations

import traceback
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from grafana_api.api.middleware.auth import (
    API_KEY_HEADER,
    APIKeyContext,
    authenticate_api_key,
    clean_api_key,
)
from grafana_api.errors import CredentialRequiredError, InvalidCredentialError, NotFoundError
from grafana_api.errors.definitions import ErrInvalidAPIKey

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_engine():
    """Create a mock engine whose key service accepts any key."""
    engine = MagicMock()
    engine.api_key_service = AsyncMock()
    engine.api_key_service.validate.return_value = SimpleNamespace(id=7, name="ci")
    return engine


# ---------------------------------------------------------------------------
# clean_api_key
# ---------------------------------------------------------------------------


class TestCleanAPIKey:
    def test_plain(self):
        assert clean_api_key("sk-abc") == "sk-abc"

    def test_trims_whitespace(self):
        assert clean_api_key("  sk-abc \t") == "sk-abc"

    def test_strips_bearer(self):
        assert clean_api_key("Bearer sk-abc") == "sk-abc"

    def test_strips_bearer_with_padding(self):
        assert clean_api_key("  Bearer   sk-abc  ") == "sk-abc"

    def test_only_first_bearer(self):
        assert clean_api_key("Bearer Bearer x") == "Bearer x"

    def test_whitespace_only(self):
        assert clean_api_key("   ") == ""

    def test_header_name(self):
        assert API_KEY_HEADER == "X-API-Key"


# ---------------------------------------------------------------------------
# APIKeyContext
# ---------------------------------------------------------------------------


class TestAPIKeyContext:
    def test_frozen(self):
        ctx = APIKeyContext(api_key_id=1, api_key_name="ci")
        with pytest.raises(AttributeError):
            ctx.api_key_id = 2  # type: ignore[misc]


# ---------------------------------------------------------------------------
# authenticate_api_key
# ---------------------------------------------------------------------------


class TestAuthenticateAPIKey:
    @pytest.mark.asyncio
    async def test_missing_header(self, mock_engine):
        with pytest.raises(CredentialRequiredError, match="API key is required"):
            await authenticate_api_key(mock_engine, None)
        mock_engine.api_key_service.validate.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_header(self, mock_engine):
        with pytest.raises(CredentialRequiredError, match="API key is required"):
            await authenticate_api_key(mock_engine, "")

    @pytest.mark.asyncio
    async def test_whitespace_header(self, mock_engine):
        with pytest.raises(CredentialRequiredError, match="API key cannot be empty"):
            await authenticate_api_key(mock_engine, "   ")
        mock_engine.api_key_service.validate.assert_not_called()

    @pytest.mark.asyncio
    async def test_valid_key(self, mock_engine):
        ctx = await authenticate_api_key(mock_engine, "sk-good", path="/api/v1/users/")
        assert ctx == APIKeyContext(api_key_id=7, api_key_name="ci")
        mock_engine.api_key_service.validate.assert_awaited_once_with("sk-good")

    @pytest.mark.asyncio
    async def test_bearer_prefix_passed_clean(self, mock_engine):
        await authenticate_api_key(mock_engine, "Bearer sk-good")
        mock_engine.api_key_service.validate.assert_awaited_once_with("sk-good")

    @pytest.mark.asyncio
    async def test_invalid_key(self, mock_engine):
        mock_engine.api_key_service.validate.side_effect = ErrInvalidAPIKey
        with pytest.raises(InvalidCredentialError, match="Invalid API key"):
            await authenticate_api_key(mock_engine, "sk-bad")

    @pytest.mark.asyncio
    async def test_any_service_error_collapses_to_invalid(self, mock_engine):
        mock_engine.api_key_service.validate.side_effect = NotFoundError("API key not found")
        with pytest.raises(InvalidCredentialError) as exc_info:
            await authenticate_api_key(mock_engine, "sk-bad")
        assert exc_info.value.status_code == 401
        assert exc_info.value.__cause__ is None


class TestRepeatedFailures:
    @staticmethod
    def _depth(exc: BaseException | None) -> int:
        return len(traceback.extract_tb(exc.__traceback__)) if exc is not None else 0

    async def test_each_failure_raises_a_fresh_error(self, engine):
        errors = []
        for _ in range(25):
            with pytest.raises(InvalidCredentialError) as exc_info:
                await authenticate_api_key(engine, "sk-" + "0" * 64)
            errors.append(exc_info.value)
        assert len({id(err) for err in errors}) == len(errors)
        depths = [(self._depth(err), self._depth(err.__context__)) for err in errors]
        assert depths[0] == depths[-1]
