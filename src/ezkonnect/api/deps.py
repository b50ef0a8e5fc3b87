"""
FastAPI dependency injection — shared singletons and per-request factories.

Usage in routers::

    from ezkonnect.api.deps import OpContext

    @router.get("/state")
    def get_state(ctx: OpContext):
        ...

Settings are loaded once per process.  Cluster clients are built lazily
per request, the first time an operation touches ``ctx.cluster``
(credentials are re-resolved every time), and closed when the response
has been sent.  Tests replace :func:`get_cluster_factory` through
``app.dependency_overrides``.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Generator
from functools import lru_cache, partial
from typing import Annotated

from fastapi import Depends, Request

from ezkonnect.core.settings import EzkonnectSettings
from ezkonnect.k8s.client import ClusterClients, create_cluster_clients
from ezkonnect.ops.context import OperationContext

# ── Settings (singleton) ─────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_settings() -> EzkonnectSettings:
    """Cached settings — loaded once per process."""
    return EzkonnectSettings()


# ── Cluster clients (lazy, per-request) ──────────────────────────────────


def get_cluster_factory(
    settings: Annotated[EzkonnectSettings, Depends(get_settings)],
) -> Callable[[], ClusterClients]:
    """Return a callable that resolves credentials and builds API handles."""
    return partial(create_cluster_clients, settings.kubeconfig)


# ── Operation context (per-request) ──────────────────────────────────────


def get_operation_context(
    request: Request,
    cluster_factory: Annotated[Callable[[], ClusterClients], Depends(get_cluster_factory)],
    settings: Annotated[EzkonnectSettings, Depends(get_settings)],
) -> Generator[OperationContext, None, None]:
    """Yield an :class:`OperationContext` and close its cluster handles afterwards."""
    ctx = OperationContext(
        cluster_factory=cluster_factory,
        request_timeout_seconds=settings.request_timeout_seconds,
        request_id=getattr(request.state, "request_id", str(uuid.uuid4())),
        caller="api",
    )
    try:
        yield ctx
    finally:
        ctx.close()


# ── Convenience type aliases ─────────────────────────────────────────────

OpContext = Annotated[OperationContext, Depends(get_operation_context)]
