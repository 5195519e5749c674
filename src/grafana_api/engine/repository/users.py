"""Users repository."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from grafana_api.engine.models.user import User
from grafana_api.errors.definitions import ErrUserEmailTaken, ErrUserNotFound

if TYPE_CHECKING:
    from grafana_api.datastore.client import Datastore

_MUTABLE_FIELDS = ("email", "first_name", "last_name", "age", "active")


class UserRepository:
    """Data access layer for users. Deleted users are invisible to reads."""

    def __init__(self, datastore: Datastore) -> None:
        self._ds = datastore

    async def create(self, user: User) -> User:
        """Persist a new user."""
        async with self._ds.session() as session:
            session.add(user)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise ErrUserEmailTaken from exc
            await session.refresh(user)
        return user

    async def get_by_id(self, user_id: int) -> User | None:
        """Find a user by primary key."""
        async with self._ds.session() as session:
            result = await session.execute(
                select(User).where(User.id == user_id, User.deleted_at.is_(None))
            )
            return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        """Find a user by email address."""
        async with self._ds.session() as session:
            result = await session.execute(
                select(User).where(User.email == email, User.deleted_at.is_(None))
            )
            return result.scalar_one_or_none()

    async def list_all(self) -> list[User]:
        """List all users ordered by ID."""
        async with self._ds.session() as session:
            result = await session.execute(
                select(User).where(User.deleted_at.is_(None)).order_by(User.id)
            )
            return list(result.scalars().all())

    async def update(self, user: User) -> User:
        """Write the mutable fields of *user* to its stored row."""
        async with self._ds.session() as session:
            existing = await session.get(User, user.id)
            if existing is None or existing.deleted_at is not None:
                raise ErrUserNotFound
            for field in _MUTABLE_FIELDS:
                setattr(existing, field, getattr(user, field))
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise ErrUserEmailTaken from exc
            await session.refresh(existing)
        return existing

    async def delete_by_id(self, user_id: int) -> bool:
        """Soft-delete a user. Returns True if a row was marked."""
        async with self._ds.session() as session:
            existing = await session.get(User, user_id)
            if existing is None or existing.deleted_at is not None:
                return False
            existing.deleted_at = datetime.now(UTC)
            await session.commit()
            return True

    async def count(self) -> int:
        """Count non-deleted users."""
        async with self._ds.session() as session:
            result = await session.execute(
                select(func.count(User.id)).where(User.deleted_at.is_(None))
            )
            return result.scalar_one()
