"""
Typed response objects returned by operations.

Field names match the JSON the API emits, so routers can dump these
dataclasses as-is.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ProjectedRecord:
    """One container's instrumentation facts, flattened from an InstrumentedApplication."""

    name: str
    namespace: str
    controller_kind: str
    container_name: str | None = None
    traces_instrumented: bool = False
    traces_instrumentable: bool = False
    service_name: str | None = None
    application: str | None = None
    language: str | None = None
    detection_status: str = ""
    opentelemetry_preconfigured: bool | None = None
    log_type: str | None = None


@dataclass(frozen=True, slots=True)
class AnnotationResult:
    """Outcome of one confirmed annotate item."""

    name: str
    namespace: str
    controller_kind: str
    updated_annotations: dict[str, str] = field(default_factory=dict)
