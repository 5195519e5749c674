"""Tests for APIKeyRepository against in-memory SQLite."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from grafana_api.engine.models.api_key import APIKey
from grafana_api.errors import DuplicateKeyError, NotFoundError, ValidationError
from grafana_api.utils.crypto import generate_api_key, hash_api_key


@pytest.fixture
def repo(engine):
    return engine.api_key_service.repository


def _new(
    name: str = "ci",
    key_hash: str | None = None,
    description: str = "",
    expires_at: datetime | None = None,
) -> APIKey:
    return APIKey(
        name=name,
        key=key_hash or hash_api_key(generate_api_key()),
        description=description,
        active=True,
        expires_at=expires_at,
    )


class TestCreate:
    async def test_assigns_id_and_timestamps(self, repo):
        stored = await repo.create(_new())
        assert stored.id > 0
        assert stored.created_at is not None
        assert stored.updated_at is not None
        assert stored.deleted_at is None

    async def test_empty_name_rejected(self, repo):
        with pytest.raises(ValidationError, match="name is required"):
            await repo.create(_new(name=""))

    async def test_empty_hash_rejected(self, repo):
        with pytest.raises(ValidationError, match="key is required"):
            await repo.create(APIKey(name="x", key="", active=True))

    async def test_duplicate_hash_rejected(self, repo):
        key_hash = hash_api_key(generate_api_key())
        await repo.create(_new(key_hash=key_hash))
        with pytest.raises(DuplicateKeyError):
            await repo.create(_new(name="again", key_hash=key_hash))

    async def test_duplicate_hash_of_deleted_key_rejected(self, repo):
        key_hash = hash_api_key(generate_api_key())
        stored = await repo.create(_new(key_hash=key_hash))
        await repo.delete(stored.id)
        with pytest.raises(DuplicateKeyError):
            await repo.create(_new(key_hash=key_hash))


class TestRead:
    async def test_get_by_id(self, repo):
        stored = await repo.create(_new(name="reader", description="reads"))
        found = await repo.get_by_id(stored.id)
        assert found.name == "reader"
        assert found.description == "reads"

    async def test_get_by_id_zero(self, repo):
        with pytest.raises(ValidationError):
            await repo.get_by_id(0)

    async def test_get_by_id_missing(self, repo):
        with pytest.raises(NotFoundError):
            await repo.get_by_id(999)

    async def test_get_by_hash(self, repo):
        key_hash = hash_api_key(generate_api_key())
        stored = await repo.create(_new(key_hash=key_hash))
        found = await repo.get_by_hash(key_hash)
        assert found.id == stored.id

    async def test_get_by_hash_empty(self, repo):
        with pytest.raises(ValidationError):
            await repo.get_by_hash("")

    async def test_get_by_hash_unknown(self, repo):
        with pytest.raises(NotFoundError):
            await repo.get_by_hash("0" * 64)

    async def test_list_ordered_by_id(self, repo):
        a = await repo.create(_new(name="a"))
        b = await repo.create(_new(name="b"))
        c = await repo.create(_new(name="c"))
        assert [k.id for k in await repo.list_all()] == [a.id, b.id, c.id]

    async def test_list_empty(self, repo):
        assert await repo.list_all() == []


class TestUpdate:
    async def test_writes_mutable_fields(self, repo):
        stored = await repo.create(_new(name="before"))
        expiry = datetime(2030, 1, 1, tzinfo=UTC)
        stored.name = "after"
        stored.description = "changed"
        stored.active = False
        stored.expires_at = expiry
        updated = await repo.update(stored)
        assert updated.name == "after"
        assert updated.description == "changed"
        assert updated.active is False
        reloaded = await repo.get_by_id(stored.id)
        assert reloaded.name == "after"
        assert reloaded.active is False

    async def test_hash_is_immutable(self, repo):
        key_hash = hash_api_key(generate_api_key())
        stored = await repo.create(_new(key_hash=key_hash))
        stored.key = "0" * 64
        await repo.update(stored)
        assert (await repo.get_by_id(stored.id)).key == key_hash

    async def test_update_zero_id(self, repo):
        with pytest.raises(ValidationError):
            await repo.update(APIKey(id=0, name="x", key="y"))

    async def test_update_empty_name(self, repo):
        stored = await repo.create(_new())
        stored.name = ""
        with pytest.raises(ValidationError):
            await repo.update(stored)

    async def test_update_missing(self, repo):
        with pytest.raises(NotFoundError):
            await repo.update(APIKey(id=404, name="x", key="y"))


class TestDelete:
    async def test_soft_delete_hides_key(self, repo):
        key_hash = hash_api_key(generate_api_key())
        stored = await repo.create(_new(key_hash=key_hash))
        await repo.delete(stored.id)
        with pytest.raises(NotFoundError):
            await repo.get_by_id(stored.id)
        with pytest.raises(NotFoundError):
            await repo.get_by_hash(key_hash)
        assert await repo.list_all() == []

    async def test_delete_twice(self, repo):
        stored = await repo.create(_new())
        await repo.delete(stored.id)
        with pytest.raises(NotFoundError):
            await repo.delete(stored.id)

    async def test_delete_zero(self, repo):
        with pytest.raises(ValidationError):
            await repo.delete(0)


class TestExistsAndCount:
    async def test_exists_by_hash(self, repo):
        key_hash = hash_api_key(generate_api_key())
        assert await repo.exists_by_hash(key_hash) is False
        await repo.create(_new(key_hash=key_hash))
        assert await repo.exists_by_hash(key_hash) is True

    async def test_exists_includes_deleted(self, repo):
        key_hash = hash_api_key(generate_api_key())
        stored = await repo.create(_new(key_hash=key_hash))
        await repo.delete(stored.id)
        assert await repo.exists_by_hash(key_hash) is True

    async def test_exists_empty_hash(self, repo):
        assert await repo.exists_by_hash("") is False

    async def test_count_excludes_deleted(self, repo):
        first = await repo.create(_new())
        await repo.create(_new())
        assert await repo.count() == 2
        await repo.delete(first.id)
        assert await repo.count() == 1

    async def test_expired_key_still_listed(self, repo):
        await repo.create(_new(expires_at=datetime.now(UTC) - timedelta(days=1)))
        assert len(await repo.list_all()) == 1
