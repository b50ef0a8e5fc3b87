"""
Request-scoped context for operations.

Every operation function receives an :class:`OperationContext` as its
first argument.  The context carries a factory for the cluster API
handles, the confirmation timeout for annotate batches and caller
identity.

Cluster handles are built on first access of :attr:`OperationContext.cluster`,
so a request rejected by decoding or validation never resolves
credentials.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import cached_property

from ezkonnect.k8s.client import ClusterClients


@dataclass
class OperationContext:
    """Context passed to every operation function.

    Attributes:
        cluster_factory: Builds the Kubernetes API handles for this request.
        request_timeout_seconds: Shared deadline for one annotate batch.
        request_id: Unique ID for this operation invocation (auto-generated).
        caller: Origin of the request (``"api"``, ``"cli"`` or ``"test"``).
    """

    cluster_factory: Callable[[], ClusterClients]
    request_timeout_seconds: float = 5
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    caller: str = "sdk"

    @classmethod
    def for_cluster(cls, cluster: ClusterClients, **kwargs) -> OperationContext:
        """Context around already-built handles (CLI, tests)."""
        return cls(cluster_factory=lambda: cluster, **kwargs)

    @cached_property
    def cluster(self) -> ClusterClients:
        return self.cluster_factory()

    @property
    def cluster_connected(self) -> bool:
        return "cluster" in self.__dict__

    def close(self) -> None:
        """Close the cluster handles if they were ever built."""
        if self.cluster_connected:
            self.__dict__.pop("cluster").close()
