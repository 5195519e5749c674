"""User service: CRUD with validation and metrics."""

from __future__ import annotations

from typing import TYPE_CHECKING

from grafana_api.engine.models.user import User
from grafana_api.engine.repository.users import UserRepository
from grafana_api.errors.definitions import (
    ErrInvalidUserID,
    ErrUserAgeRange,
    ErrUserEmailRequired,
    ErrUserEmailTaken,
    ErrUserFirstNameRequired,
    ErrUserLastNameRequired,
    ErrUserNotFound,
)

if TYPE_CHECKING:
    from grafana_api.engine.client import AppEngine

MIN_AGE = 1
MAX_AGE = 120


def _validate_fields(email: str, first_name: str, last_name: str, age: int) -> None:
    if not email:
        raise ErrUserEmailRequired
    if not first_name:
        raise ErrUserFirstNameRequired
    if not last_name:
        raise ErrUserLastNameRequired
    if age < MIN_AGE or age > MAX_AGE:
        raise ErrUserAgeRange


class UserService:
    """User management: create, get, list, update, delete users."""

    def __init__(self, engine: AppEngine) -> None:
        self._engine = engine
        self._repo = UserRepository(engine.datastore)

    async def create_user(
        self,
        email: str,
        first_name: str,
        last_name: str,
        age: int,
    ) -> User:
        """Create a new active user.

        Raises:
            ValidationError: If a field is missing or age is out of range.
            DuplicateKeyError: If the email is already registered.
        """
        _validate_fields(email, first_name, last_name, age)

        if await self._repo.get_by_email(email) is not None:
            raise ErrUserEmailTaken

        user = User(email=email, first_name=first_name, last_name=last_name, age=age, active=True)
        user = await self._repo.create(user)

        metrics = self._engine.metrics
        if metrics is not None:
            metrics.record_user_creation()
            metrics.record_user_age(user.age)
            metrics.set_active_users(await self._repo.count())
        return user

    async def get_user(self, user_id: int) -> User:
        """Get a user by ID.

        Raises:
            ValidationError: If *user_id* is zero.
            NotFoundError: If the user does not exist.
        """
        if not user_id:
            raise ErrInvalidUserID
        user = await self._repo.get_by_id(user_id)
        if user is None:
            raise ErrUserNotFound
        return user

    async def list_users(self) -> list[User]:
        """List all users."""
        return await self._repo.list_all()

    async def count_users(self) -> int:
        """Return the number of users."""
        return await self._repo.count()

    async def update_user(
        self,
        user_id: int,
        *,
        email: str,
        first_name: str,
        last_name: str,
        age: int,
        active: bool,
    ) -> User:
        """Replace a user's fields.

        Raises:
            ValidationError: If a field is invalid.
            NotFoundError: If the user does not exist.
            DuplicateKeyError: If the new email belongs to another user.
        """
        _validate_fields(email, first_name, last_name, age)
        user = await self.get_user(user_id)

        if user.email != email:
            other = await self._repo.get_by_email(email)
            if other is not None and other.id != user_id:
                raise ErrUserEmailTaken

        user.email = email
        user.first_name = first_name
        user.last_name = last_name
        user.age = age
        user.active = active
        user = await self._repo.update(user)

        metrics = self._engine.metrics
        if metrics is not None:
            metrics.record_user_update()
            metrics.record_user_age(user.age)
        return user

    async def delete_user(self, user_id: int) -> None:
        """Soft-delete a user.

        Raises:
            ValidationError: If *user_id* is zero.
            NotFoundError: If the user does not exist.
        """
        if not user_id:
            raise ErrInvalidUserID
        if not await self._repo.delete_by_id(user_id):
            raise ErrUserNotFound

        metrics = self._engine.metrics
        if metrics is not None:
            metrics.record_user_deletion()
            metrics.set_active_users(await self._repo.count())
