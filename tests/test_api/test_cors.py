"""Tests for CORS middleware configuration."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from grafana_api.api.middleware.cors import setup_cors
from grafana_api.config.settings import CORSConfig


def _app(config: CORSConfig | None = None) -> FastAPI:
    app = FastAPI()
    setup_cors(app, config or CORSConfig())

    @app.get("/test")
    async def test_route():
        return {"ok": True}

    return app


class TestCORSMiddleware:
    def test_preflight_allows_api_key_header(self):
        client = TestClient(_app())
        resp = client.options(
            "/test",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "x-api-key",
            },
        )
        assert resp.status_code == 200
        assert "access-control-allow-origin" in resp.headers
        assert "x-api-key" in resp.headers["access-control-allow-headers"].lower()

    def test_simple_request_exposes_headers(self):
        client = TestClient(_app())
        resp = client.get("/test", headers={"Origin": "http://localhost:3000"})
        assert resp.status_code == 200
        expose = resp.headers.get("access-control-expose-headers", "").lower()
        assert "content-length" in expose

    def test_restricted_origin(self):
        config = CORSConfig(allow_origins=["https://grafana.example.com"])
        client = TestClient(_app(config))
        resp = client.get("/test", headers={"Origin": "https://evil.example.com"})
        assert "access-control-allow-origin" not in resp.headers
        resp = client.get("/test", headers={"Origin": "https://grafana.example.com"})
        assert resp.headers["access-control-allow-origin"] == "https://grafana.example.com"

    def test_config_not_mutated(self):
        config = CORSConfig()
        setup_cors(FastAPI(), config)
        assert "X-API-Key" not in config.allow_headers
