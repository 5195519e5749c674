"""APIKey model: hashed credentials granting access to protected routes."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from grafana_api.engine.models.base import Base, TimestampMixin


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC (SQLite drops the tzinfo)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class APIKey(Base, TimestampMixin):
    """A stored API key.

    The ``key`` column holds the SHA-256 hex digest of the plaintext key.
    The plaintext is returned only at creation and never stored.
    """

    __tablename__ = "api_keys"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    key: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True, index=True, comment="SHA-256 hex of the key"
    )
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )

    def is_expired(self, now: datetime | None = None) -> bool:
        """Return True if ``expires_at`` is set and not strictly after *now*."""
        if self.expires_at is None:
            return False
        now = now or datetime.now(UTC)
        return as_utc(now) >= as_utc(self.expires_at)

    def is_valid(self, now: datetime | None = None) -> bool:
        """Return True if the key is active and not expired."""
        return bool(self.active) and not self.is_expired(now)

    def __repr__(self) -> str:
        return f"<APIKey id={self.id} name={self.name!r} active={self.active}>"
