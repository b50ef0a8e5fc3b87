"""
Domain schemas — request items and response records.

Request items are decoded from a JSON array; unknown keys are ignored.
``controller_kind`` and ``action`` are plain strings here and checked by
:mod:`ezkonnect.ops.validation`, so a bad value rejects the whole batch
with one message naming the offending item.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from ezkonnect.ops.requests import LogsAnnotationRequest, TracesAnnotationRequest


# ── Requests ─────────────────────────────────────────────────────────────


class TracesAnnotationItem(BaseModel):
    """One item of ``POST /annotate/traces``."""

    name: str = Field(description="Workload name")
    controller_kind: str = Field(description="deployment | statefulset")
    namespace: str = Field(description="Workload namespace")
    action: str = Field(description="add | delete")
    service_name: str | None = Field(default=None, description="Optional service name override")

    def to_request(self) -> TracesAnnotationRequest:
        return TracesAnnotationRequest(
            name=self.name,
            controller_kind=self.controller_kind,
            namespace=self.namespace,
            action=self.action,
            service_name=self.service_name,
        )


class LogsAnnotationItem(BaseModel):
    """One item of ``POST /annotate/logs``. An empty or missing ``log_type`` clears it."""

    name: str = Field(description="Workload name")
    controller_kind: str = Field(description="deployment | statefulset")
    namespace: str = Field(description="Workload namespace")
    log_type: str = Field(default="", description="Log type; empty or omitted removes the annotation")

    def to_request(self) -> LogsAnnotationRequest:
        return LogsAnnotationRequest(
            name=self.name,
            controller_kind=self.controller_kind,
            namespace=self.namespace,
            log_type=self.log_type,
        )


# ── Responses ────────────────────────────────────────────────────────────


class AnnotationResultSchema(BaseModel):
    name: str
    namespace: str
    controller_kind: str
    updated_annotations: dict[str, str]


class ProjectedRecordSchema(BaseModel):
    """One container of one InstrumentedApplication.

    Optional fields are always present and ``null`` when unknown.
    """

    name: str
    namespace: str
    controller_kind: str
    container_name: str | None
    traces_instrumented: bool
    traces_instrumentable: bool
    service_name: str | None
    application: str | None
    language: str | None
    detection_status: str
    opentelemetry_preconfigured: bool | None
    log_type: str | None
