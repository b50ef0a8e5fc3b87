"""Tests for the FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from ezkonnect.api.app import create_app
from ezkonnect.core.settings import EzkonnectSettings


class TestCreateApp:
    def test_returns_fastapi_instance(self, settings):
        assert isinstance(create_app(settings=settings), FastAPI)

    def test_openapi_under_prefix(self, settings):
        app = create_app(settings=settings)
        assert app.openapi_url == "/api/v1/openapi.json"

    def test_custom_settings(self, tmp_path):
        s = EzkonnectSettings(api_prefix="/v2", api_title="Custom", kubeconfig=tmp_path / "kc")
        app = create_app(settings=s)
        paths = [r.path for r in app.routes]
        assert app.title == "Custom"
        assert "/v2/state" in paths

    def test_routes_registered(self, settings):
        paths = [r.path for r in create_app(settings=settings).routes]
        assert "/api/v1/state" in paths
        assert "/api/v1/annotate/traces" in paths
        assert "/api/v1/annotate/logs" in paths
        assert "/health" in paths
        assert "/health/live" in paths

    def test_cors_middleware_present(self, settings):
        names = [m.cls.__name__ for m in create_app(settings=settings).user_middleware]
        assert "CORSMiddleware" in names
        assert "RequestIDMiddleware" in names

    def test_settings_on_state(self, tmp_path):
        s = EzkonnectSettings(debug=True, kubeconfig=tmp_path / "kc")
        assert create_app(settings=s).state.settings.debug is True


class TestMiddleware:
    def test_request_id_echoed(self, client):
        resp = client.get("/api/v1/state", headers={"X-Request-ID": "req-123"})
        assert resp.headers["X-Request-ID"] == "req-123"

    def test_request_id_generated(self, client):
        assert client.get("/api/v1/state").headers["X-Request-ID"]

    def test_process_time_header(self, client):
        assert float(client.get("/api/v1/state").headers["X-Process-Time-Ms"]) >= 0


class TestHealth:
    def test_live(self, client):
        assert client.get("/health/live").json() == {"status": "alive"}

    def test_unreachable_cluster_is_unhealthy(self, client, monkeypatch):
        # missing kubeconfig and no in-cluster service host
        monkeypatch.delenv("KUBERNETES_SERVICE_HOST", raising=False)
        resp = client.get("/health")
        assert resp.status_code == 503
        assert resp.json()["checks"]["kubernetes"]["status"] == "unhealthy"
