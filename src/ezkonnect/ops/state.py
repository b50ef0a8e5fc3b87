"""
Instrumentation state: list InstrumentedApplications and project them.

``get_state`` does one cluster-wide list of the custom resource, reads
the owner workload of every language-detected resource once (for
service-name resolution) and hands everything to :func:`project`,
which is a pure function of its inputs.

Projection rules, per resource:

- internal resources (see :func:`~ezkonnect.k8s.models.is_internal_resource`)
  and resources without an owner reference are skipped
- ``languages`` → one record per entry, instrumentable, service name resolved
- ``applications`` → one record per entry, not instrumentable
- neither → exactly one record with no container, application or language

Instrumentability is tied strictly to language detection: an
application-only entry is never reported as instrumentable, even though
a container is known.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from kubernetes.client.exceptions import ApiException

from ezkonnect.core.errors import ClusterAccessError, EzkonnectError
from ezkonnect.core.logging import get_logger
from ezkonnect.k8s.client import RESOURCE_GROUP, RESOURCE_PLURAL, RESOURCE_VERSION
from ezkonnect.k8s.models import (
    ApplicationDetection,
    InstrumentedApplication,
    LanguageDetection,
    NoDetection,
)
from ezkonnect.k8s.workloads import (
    WorkloadAccessor,
    container_names,
    template_annotations,
)
from ezkonnect.ops.annotations import SERVICE_NAME_ANNOTATION
from ezkonnect.ops.context import OperationContext
from ezkonnect.ops.responses import ProjectedRecord
from ezkonnect.ops.result import OperationResult, start_timer
from ezkonnect.ops.validation import is_valid_kind

logger = get_logger(__name__)

OwnerKey = tuple[str, str, str]  # (kind, namespace, name)


@dataclass(frozen=True, slots=True)
class PodTemplateInfo:
    """The parts of an owner workload's pod template that name a service."""

    annotations: Mapping[str, str]
    container_names: tuple[str, ...]


def get_state(ctx: OperationContext) -> OperationResult[list[ProjectedRecord]]:
    """List every InstrumentedApplication in the cluster as projected records."""
    timer = start_timer()
    try:
        applications = list_instrumented_applications(ctx)
        templates = load_owner_templates(WorkloadAccessor(ctx.cluster.apps), applications)
        records = project(applications, templates)
    except EzkonnectError as exc:
        logger.error("get_state_failed", **exc.to_dict())
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", error=str(exc))
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)

    logger.debug("state_projected", resources=len(applications), records=len(records))
    return OperationResult.ok(records, elapsed_ms=timer.elapsed_ms)


def list_instrumented_applications(ctx: OperationContext) -> list[InstrumentedApplication]:
    """Decode every InstrumentedApplication in every namespace."""
    try:
        listing = ctx.cluster.custom.list_cluster_custom_object(
            RESOURCE_GROUP, RESOURCE_VERSION, RESOURCE_PLURAL
        )
    except ApiException as exc:
        raise ClusterAccessError(f"Error listing resources {exc.reason}", cause=exc).with_context(
            resource=RESOURCE_PLURAL
        ) from exc
    return [InstrumentedApplication.from_object(item) for item in listing.get("items") or []]


def load_owner_templates(
    accessor: WorkloadAccessor,
    applications: Iterable[InstrumentedApplication],
) -> dict[OwnerKey, PodTemplateInfo]:
    """Fetch each distinct owner workload of a language-detected resource once.

    Owners that no longer exist are left out, so their records fall back
    to the computed service name.
    """
    templates: dict[OwnerKey, PodTemplateInfo] = {}
    for app in applications:
        if app.is_internal or app.owner is None or not isinstance(app.detection, LanguageDetection):
            continue
        key = (app.controller_kind, app.namespace, app.owner.name)
        if key in templates or not is_valid_kind(app.controller_kind):
            continue
        try:
            workload = accessor.get(app.controller_kind, app.namespace, app.owner.name)
        except ClusterAccessError as exc:
            if exc.status == 404:
                logger.warning("owner_workload_missing", kind=key[0], namespace=key[1], name=key[2])
                continue
            raise
        templates[key] = PodTemplateInfo(
            annotations=template_annotations(workload),
            container_names=tuple(container_names(workload)),
        )
    return templates


def resolve_service_name(
    container_name: str | None,
    owner_name: str,
    template: PodTemplateInfo | None = None,
) -> str | None:
    """Service name reported for a language-detected container.

    Precedence:
        1. an explicit ``logz.io/service-name`` pod-template annotation
        2. the container name, when the pod has more than one container
        3. the container name, when it already equals the owner name
        4. ``<owner-name-lowercased>-<container-name>``
    """
    if template is not None and template.annotations.get(SERVICE_NAME_ANNOTATION):
        return template.annotations[SERVICE_NAME_ANNOTATION]
    if container_name is None:
        return None
    if template is not None and len(template.container_names) > 1:
        return container_name
    if owner_name == container_name:
        return container_name
    return f"{owner_name.lower()}-{container_name}"


def project(
    applications: Iterable[InstrumentedApplication],
    templates: Mapping[OwnerKey, PodTemplateInfo] | None = None,
) -> list[ProjectedRecord]:
    """Flatten InstrumentedApplications into per-container records."""
    templates = templates or {}
    records: list[ProjectedRecord] = []

    for app in applications:
        if app.is_internal:
            continue
        if app.owner is None:
            logger.warning("owner_reference_missing", namespace=app.namespace, name=app.name)
            continue

        common = {
            "name": app.name,
            "namespace": app.namespace,
            "controller_kind": app.controller_kind,
            "traces_instrumented": app.traces_instrumented,
            "detection_status": app.detection_phase,
            "log_type": app.log_type,
        }

        match app.detection:
            case LanguageDetection(entries=entries):
                template = templates.get((app.controller_kind, app.namespace, app.owner.name))
                records.extend(
                    ProjectedRecord(
                        **common,
                        container_name=entry.container_name,
                        traces_instrumentable=True,
                        service_name=resolve_service_name(entry.container_name, app.owner.name, template),
                        language=entry.language,
                        opentelemetry_preconfigured=entry.opentelemetry_preconfigured,
                    )
                    for entry in entries
                )
            case ApplicationDetection(entries=entries):
                records.extend(
                    ProjectedRecord(
                        **common,
                        container_name=entry.container_name,
                        traces_instrumentable=False,
                        application=entry.application,
                        opentelemetry_preconfigured=False,
                    )
                    for entry in entries
                )
            case NoDetection():
                records.append(ProjectedRecord(**common, traces_instrumentable=False))

    return records
