"""Engine data models (SQLAlchemy ORM).

Import :data:`ALL_MODELS` for migration and table creation.
"""

from grafana_api.engine.models.api_key import APIKey
from grafana_api.engine.models.base import Base, TimestampMixin
from grafana_api.engine.models.user import User

ALL_MODELS: list[type[Base]] = [
    User,
    APIKey,
]

__all__ = [
    "ALL_MODELS",
    "APIKey",
    "Base",
    "TimestampMixin",
    "User",
]
