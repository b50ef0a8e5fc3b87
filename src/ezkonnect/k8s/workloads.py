"""
Workload accessor: read and write Deployment/StatefulSet pod templates.

Both kinds expose the same ``spec.template.metadata.annotations`` map,
so the accessor dispatches on the lowercased kind and otherwise treats
them identically.

``update`` is a full ``replace`` of the object that was read, not a
patch.  Two concurrent writers race and the API server rejects the
stale one with 409; that conflict is surfaced, never retried.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Protocol

from kubernetes import client
from kubernetes.client.exceptions import ApiException

from ezkonnect.core.errors import ClusterAccessError
from ezkonnect.core.logging import get_logger

logger = get_logger(__name__)

KIND_DEPLOYMENT = "deployment"
KIND_STATEFULSET = "statefulset"

Workload = client.V1Deployment | client.V1StatefulSet


class AnnotationChange(Protocol):
    """Anything that says which annotation keys to set and which to drop."""

    @property
    def set(self) -> Mapping[str, str]: ...

    @property
    def remove(self) -> Iterable[str]: ...


class WorkloadAccessor:
    """Get and replace Deployments and StatefulSets through ``AppsV1Api``."""

    def __init__(self, apps: client.AppsV1Api):
        self._readers = {
            KIND_DEPLOYMENT: apps.read_namespaced_deployment,
            KIND_STATEFULSET: apps.read_namespaced_stateful_set,
        }
        self._writers = {
            KIND_DEPLOYMENT: apps.replace_namespaced_deployment,
            KIND_STATEFULSET: apps.replace_namespaced_stateful_set,
        }

    def get(self, kind: str, namespace: str, name: str) -> Workload:
        reader = self._readers.get(kind.lower())
        if reader is None:
            raise ClusterAccessError(f"Unsupported workload kind {kind!r}").with_context(
                resource=kind, namespace=namespace, name=name
            )
        try:
            return reader(name=name, namespace=namespace)
        except ApiException as exc:
            raise ClusterAccessError(f"Error getting resource {exc.reason}", cause=exc).with_context(
                resource=kind.lower(), namespace=namespace, name=name
            ) from exc

    def update(self, kind: str, namespace: str, workload: Workload) -> Workload:
        name = workload.metadata.name
        writer = self._writers.get(kind.lower())
        if writer is None:
            raise ClusterAccessError(f"Unsupported workload kind {kind!r}").with_context(
                resource=kind, namespace=namespace, name=name
            )
        try:
            updated = writer(name=name, namespace=namespace, body=workload)
        except ApiException as exc:
            raise ClusterAccessError(f"Error updating resource {exc.reason}", cause=exc).with_context(
                resource=kind.lower(), namespace=namespace, name=name
            ) from exc
        logger.info("workload_updated", kind=kind.lower(), namespace=namespace, name=name)
        return updated


def apply_annotations(workload: Workload, change: AnnotationChange) -> Workload:
    """Merge ``change`` into the pod-template annotations in place.

    The template metadata and annotation map are created when missing;
    keys not named by ``change`` are left untouched.
    """
    template = workload.spec.template
    if template.metadata is None:
        template.metadata = client.V1ObjectMeta()
    if template.metadata.annotations is None:
        template.metadata.annotations = {}

    annotations = template.metadata.annotations
    annotations.update(change.set)
    for key in change.remove:
        annotations.pop(key, None)
    return workload


def template_annotations(workload: Workload) -> dict[str, str]:
    """Pod-template annotations, empty when the map is absent."""
    metadata = workload.spec.template.metadata
    if metadata is None or metadata.annotations is None:
        return {}
    return dict(metadata.annotations)


def container_names(workload: Workload) -> list[str]:
    """Names of the pod template's (non-init) containers."""
    pod_spec = workload.spec.template.spec
    if pod_spec is None or not pod_spec.containers:
        return []
    return [c.name for c in pod_spec.containers]
