"""Repositories: data access over the async datastore."""

from grafana_api.engine.repository.api_keys import APIKeyRepository
from grafana_api.engine.repository.users import UserRepository

__all__ = ["APIKeyRepository", "UserRepository"]
