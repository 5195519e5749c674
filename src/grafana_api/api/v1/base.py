"""V1 base routes: health and Prometheus metrics."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Request
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from grafana_api.api.v1.schemas import HealthResponse

router = APIRouter(tags=["base"])


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok", message="Service is healthy", time=datetime.now(UTC))


@router.get("/metrics", include_in_schema=False)
async def metrics_endpoint(request: Request) -> Response:
    """Prometheus metrics endpoint."""
    metrics = getattr(request.app.state, "metrics", None)
    body = generate_latest(metrics.registry) if metrics is not None else b""
    return Response(content=body, media_type=CONTENT_TYPE_LATEST)
