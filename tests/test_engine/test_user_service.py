"""Tests for UserService: CRUD, validation and metrics."""

from __future__ import annotations

import pytest

from grafana_api.errors import DuplicateKeyError, NotFoundError, ValidationError


@pytest.fixture
def users(engine):
    return engine.user_service


async def _ada(users, email: str = "ada@example.com"):
    return await users.create_user(email, "Ada", "Lovelace", 36)


class TestCreateUser:
    async def test_create(self, users):
        user = await _ada(users)
        assert user.id > 0
        assert user.email == "ada@example.com"
        assert user.active is True
        assert user.created_at is not None

    @pytest.mark.parametrize(
        ("email", "first", "last", "age", "message"),
        [
            ("", "Ada", "Lovelace", 36, "email is required"),
            ("a@b.com", "", "Lovelace", 36, "first name is required"),
            ("a@b.com", "Ada", "", 36, "last name is required"),
            ("a@b.com", "Ada", "Lovelace", 0, "age must be between"),
            ("a@b.com", "Ada", "Lovelace", 121, "age must be between"),
        ],
    )
    async def test_invalid_fields(self, users, email, first, last, age, message):
        with pytest.raises(ValidationError, match=message):
            await users.create_user(email, first, last, age)

    async def test_age_bounds_inclusive(self, users):
        await users.create_user("young@example.com", "Yo", "Ung", 1)
        await users.create_user("old@example.com", "Ol", "Der", 120)
        assert await users.count_users() == 2

    async def test_duplicate_email(self, users):
        await _ada(users)
        with pytest.raises(DuplicateKeyError):
            await _ada(users)

    async def test_records_metrics(self, users, metrics):
        await _ada(users)
        registry = metrics.registry
        assert registry.get_sample_value("user_creation_total") == 1
        assert registry.get_sample_value("active_users_total") == 1
        assert registry.get_sample_value("user_age_distribution_count") == 1
        assert registry.get_sample_value("user_age_distribution_bucket", {"le": "40.0"}) == 1


class TestReadUsers:
    async def test_get_user(self, users):
        created = await _ada(users)
        found = await users.get_user(created.id)
        assert found.full_name == "Ada Lovelace"

    async def test_get_user_zero(self, users):
        with pytest.raises(ValidationError):
            await users.get_user(0)

    async def test_get_user_missing(self, users):
        with pytest.raises(NotFoundError, match="user not found"):
            await users.get_user(42)

    async def test_list_users(self, users):
        await _ada(users, "one@example.com")
        await _ada(users, "two@example.com")
        listed = await users.list_users()
        assert [u.email for u in listed] == ["one@example.com", "two@example.com"]


class TestUpdateUser:
    async def test_update(self, users, metrics):
        created = await _ada(users)
        updated = await users.update_user(
            created.id,
            email="countess@example.com",
            first_name="Augusta",
            last_name="King",
            age=37,
            active=False,
        )
        assert updated.email == "countess@example.com"
        assert updated.first_name == "Augusta"
        assert updated.active is False
        assert metrics.registry.get_sample_value("user_update_total") == 1

    async def test_update_same_email(self, users):
        created = await _ada(users)
        updated = await users.update_user(
            created.id,
            email=created.email,
            first_name="Ada",
            last_name="Byron",
            age=36,
            active=True,
        )
        assert updated.last_name == "Byron"

    async def test_update_email_taken(self, users):
        await _ada(users, "first@example.com")
        second = await _ada(users, "second@example.com")
        with pytest.raises(DuplicateKeyError):
            await users.update_user(
                second.id,
                email="first@example.com",
                first_name="Ada",
                last_name="Lovelace",
                age=36,
                active=True,
            )

    async def test_update_missing(self, users):
        with pytest.raises(NotFoundError):
            await users.update_user(
                77, email="x@example.com", first_name="Xx", last_name="Yy", age=20, active=True
            )


class TestDeleteUser:
    async def test_delete(self, users, metrics):
        created = await _ada(users)
        await users.delete_user(created.id)
        with pytest.raises(NotFoundError):
            await users.get_user(created.id)
        assert await users.list_users() == []
        assert metrics.registry.get_sample_value("user_deletion_total") == 1
        assert metrics.registry.get_sample_value("active_users_total") == 0

    async def test_delete_missing(self, users):
        with pytest.raises(NotFoundError):
            await users.delete_user(5)

    async def test_delete_zero(self, users):
        with pytest.raises(ValidationError):
            await users.delete_user(0)
