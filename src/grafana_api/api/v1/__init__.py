"""V1 REST API routes.

Combines all sub-routers under the ``/api/v1`` prefix.
"""

from fastapi import APIRouter

from grafana_api.api.v1.api_keys import router as api_keys_router
from grafana_api.api.v1.base import router as base_router
from grafana_api.api.v1.users import router as users_router

v1_router = APIRouter(prefix="/api/v1")

v1_router.include_router(base_router)
v1_router.include_router(users_router)
v1_router.include_router(api_keys_router)

__all__ = ["v1_router"]
