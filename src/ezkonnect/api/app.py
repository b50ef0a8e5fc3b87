"""
FastAPI application factory.

``create_app()`` wires logging, middleware, routers, error handlers and
lifespan events into a single ``FastAPI`` instance.  It is the only
place that touches ``FastAPI`` directly.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from ezkonnect.api.deps import get_settings
from ezkonnect.api.middleware.errors import (
    ezkonnect_error_handler,
    http_exception_handler,
    request_validation_handler,
    unhandled_exception_handler,
)
from ezkonnect.api.middleware.request_id import RequestIDMiddleware
from ezkonnect.api.middleware.timing import TimingMiddleware
from ezkonnect.core.errors import EzkonnectError
from ezkonnect.core.health import HealthCheck, create_health_router
from ezkonnect.core.logging import configure_logging, get_logger
from ezkonnect.core.settings import EzkonnectSettings
from ezkonnect.k8s.client import create_cluster_clients


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan — startup / shutdown hooks."""
    settings: EzkonnectSettings = app.state.settings
    log = get_logger("ezkonnect.api")
    log.info(
        "ezkonnect_starting",
        version=app.version,
        request_timeout_seconds=settings.request_timeout_seconds,
        kubeconfig=str(settings.kubeconfig) if settings.kubeconfig.is_file() else None,
    )
    yield
    log.info("ezkonnect_shutting_down")


def _cluster_check(settings: EzkonnectSettings) -> HealthCheck:
    def check() -> str:
        cluster = create_cluster_clients(settings.kubeconfig)
        try:
            return cluster.server_version()
        finally:
            cluster.close()

    return HealthCheck("kubernetes", check, timeout_s=float(settings.request_timeout_seconds))


def create_app(*, settings: EzkonnectSettings | None = None) -> FastAPI:
    """Build and return a fully-configured FastAPI application.

    Parameters
    ----------
    settings : EzkonnectSettings | None
        Override settings (useful for testing).  When ``None`` the cached
        singleton from :func:`get_settings` is used.
    """
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, json_format=settings.log_json, service="ezkonnect-server")

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
        docs_url=f"{settings.api_prefix}/docs",
        openapi_url=f"{settings.api_prefix}/openapi.json",
    )

    # Stash settings on app state for middleware access
    app.state.settings = settings
    app.dependency_overrides[get_settings] = lambda: settings

    # ── Middleware (outermost → innermost) ────────────────────────────
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # ── Exception handlers ───────────────────────────────────────────
    app.add_exception_handler(EzkonnectError, ezkonnect_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ── Routers ──────────────────────────────────────────────────────
    from ezkonnect.api.routers import annotate, state

    app.include_router(
        create_health_router("ezkonnect-server", settings.api_version, checks=[_cluster_check(settings)]),
    )
    app.include_router(state.router, prefix=settings.api_prefix, tags=["state"])
    app.include_router(annotate.router, prefix=settings.api_prefix, tags=["annotate"])

    return app
