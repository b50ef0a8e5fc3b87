"""Health checks for the ezkonnect server.

``create_health_router()`` gives the app three Kubernetes-style
endpoints: ``/health``, ``/health/ready`` and ``/health/live``.

Dependency checks are plain blocking callables (the Kubernetes client
is synchronous); each runs in a worker thread under its own timeout so
a hung API server turns into an ``unhealthy`` result instead of a hung
check.

Quick start::

    router = create_health_router(
        service_name="ezkonnect-server",
        version="1.0.0",
        checks=[HealthCheck("kubernetes", ping_cluster)],
    )
    app.include_router(router)
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

Status = Literal["healthy", "degraded", "unhealthy"]

_START_TIME = time.monotonic()


class CheckResult(BaseModel):
    """Result of a single dependency check."""

    status: Status
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Body of ``GET /health`` and ``GET /health/ready``."""

    status: Status = "healthy"
    service: str = ""
    version: str = ""
    uptime_s: float = Field(default_factory=lambda: round(time.monotonic() - _START_TIME, 1))
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    checks: dict[str, CheckResult] = Field(default_factory=dict)


@dataclass
class HealthCheck:
    """A named blocking check.

    ``func`` raises on failure; its return value is ignored.  A failing
    ``required`` check makes the service ``unhealthy``, an optional one
    only ``degraded``.
    """

    name: str
    func: Callable[[], Any]
    required: bool = True
    timeout_s: float = 5.0


async def _run_check(check: HealthCheck) -> CheckResult:
    start = time.monotonic()
    try:
        await asyncio.wait_for(asyncio.to_thread(check.func), timeout=check.timeout_s)
    except TimeoutError:
        return CheckResult(status="unhealthy", error="timeout")
    except Exception as exc:  # noqa: BLE001
        return CheckResult(
            status="unhealthy",
            latency_ms=round((time.monotonic() - start) * 1000, 2),
            error=str(exc)[:200],
        )
    return CheckResult(status="healthy", latency_ms=round((time.monotonic() - start) * 1000, 2))


async def run_checks(checks: list[HealthCheck]) -> tuple[Status, dict[str, CheckResult]]:
    """Run every check concurrently and fold the results into one status."""
    results = await asyncio.gather(*[_run_check(c) for c in checks])
    by_name = {c.name: r for c, r in zip(checks, results)}

    status: Status = "healthy"
    for check, result in zip(checks, results):
        if result.status == "healthy":
            continue
        if check.required:
            return "unhealthy", by_name
        status = "degraded"
    return status, by_name


def create_health_router(
    service_name: str,
    version: str,
    checks: list[HealthCheck] | None = None,
    prefix: str = "/health",
) -> APIRouter:
    """Build the health router.

    ``GET {prefix}`` returns 503 only when unhealthy, ``GET
    {prefix}/ready`` whenever anything is not healthy, and ``GET
    {prefix}/live`` always returns 200.
    """
    router = APIRouter(tags=["health"])
    _checks = list(checks or [])

    async def _respond(ready: bool) -> JSONResponse:
        status, results = await run_checks(_checks)
        body = HealthResponse(status=status, service=service_name, version=version, checks=results)
        failing = status != "healthy" if ready else status == "unhealthy"
        return JSONResponse(content=body.model_dump(), status_code=503 if failing else 200)

    @router.get(prefix, response_model=HealthResponse)
    async def health() -> JSONResponse:
        return await _respond(ready=False)

    @router.get(f"{prefix}/ready", response_model=HealthResponse)
    async def readiness() -> JSONResponse:
        return await _respond(ready=True)

    @router.get(f"{prefix}/live")
    async def liveness() -> dict[str, str]:
        return {"status": "alive"}

    return router
