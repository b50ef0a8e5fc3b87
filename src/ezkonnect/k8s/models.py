"""
Typed view of the ``InstrumentedApplication`` custom resource.

The operator writes a loosely-shaped document: ``spec`` carries either
a ``languages`` list, an ``applications`` list or neither, and
``status`` may be partially filled while detection is still running.
:meth:`InstrumentedApplication.from_object` turns the decoded dict into
frozen dataclasses with explicit presence checks, so the projector
never indexes into raw dicts.

The two detection lists are mutually exclusive and modelled as a tagged
union::

    Detection = NoDetection | LanguageDetection | ApplicationDetection

Example document::

    apiVersion: logz.io/v1alpha1
    kind: InstrumentedApplication
    metadata:
      name: deployment-checkout
      namespace: shop
      ownerReferences:
        - kind: Deployment
          name: checkout
    spec:
      logType: nginx
      languages:
        - language: java
          containerName: checkout
          opentelemetryPreconfigured: false
    status:
      tracesInstrumented: true
      instrumentationDetection:
        phase: Completed
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ezkonnect.core.logging import get_logger

logger = get_logger(__name__)

# Resources created for the operator's own workloads
INTERNAL_NAME_MARKER = "ezkonnect"
INTERNAL_NAMES = frozenset({"kubernetes-instrumentor"})


def is_internal_resource(name: str) -> bool:
    """True for resources that belong to the instrumentation stack itself."""
    return INTERNAL_NAME_MARKER in name or name in INTERNAL_NAMES


@dataclass(frozen=True)
class OwnerReference:
    kind: str
    name: str


@dataclass(frozen=True)
class LanguageEntry:
    language: str | None
    container_name: str | None
    opentelemetry_preconfigured: bool = False


@dataclass(frozen=True)
class ApplicationEntry:
    application: str | None
    container_name: str | None


@dataclass(frozen=True)
class NoDetection:
    """Neither list exists: no container has been detected yet."""


@dataclass(frozen=True)
class LanguageDetection:
    entries: tuple[LanguageEntry, ...]


@dataclass(frozen=True)
class ApplicationDetection:
    entries: tuple[ApplicationEntry, ...]


Detection = NoDetection | LanguageDetection | ApplicationDetection


@dataclass(frozen=True)
class InstrumentedApplication:
    """One ``InstrumentedApplication`` resource, decoded.

    Attributes:
        name: Resource name
        namespace: Resource namespace
        owner: First owner reference (the controlling workload), if any
        log_type: ``spec.logType``; ``None`` when absent or empty
        detection: Which detection list the operator populated
        traces_instrumented: ``status.tracesInstrumented``
        detection_phase: ``status.instrumentationDetection.phase``
    """

    name: str
    namespace: str
    owner: OwnerReference | None
    log_type: str | None
    detection: Detection
    traces_instrumented: bool
    detection_phase: str

    @property
    def controller_kind(self) -> str | None:
        return self.owner.kind.lower() if self.owner else None

    @property
    def is_internal(self) -> bool:
        return is_internal_resource(self.name)

    @classmethod
    def from_object(cls, obj: Mapping[str, Any]) -> InstrumentedApplication:
        """Decode a resource as returned by ``CustomObjectsApi``."""
        metadata = _mapping(obj.get("metadata"))
        spec = _mapping(obj.get("spec"))
        status = _mapping(obj.get("status"))
        name = metadata.get("name", "")

        owners = metadata.get("ownerReferences") or []
        owner = None
        if owners:
            first = _mapping(owners[0])
            owner = OwnerReference(kind=first.get("kind", ""), name=first.get("name", ""))

        return cls(
            name=name,
            namespace=metadata.get("namespace", ""),
            owner=owner,
            log_type=spec.get("logType") or None,
            detection=_decode_detection(name, spec),
            traces_instrumented=bool(status.get("tracesInstrumented", False)),
            detection_phase=_mapping(status.get("instrumentationDetection")).get("phase", ""),
        )


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _decode_detection(name: str, spec: Mapping[str, Any]) -> Detection:
    languages = spec.get("languages")
    applications = spec.get("applications")

    if isinstance(languages, list):
        if isinstance(applications, list):
            logger.warning("both_detection_lists_present", name=name, using="languages")
        return LanguageDetection(
            entries=tuple(
                LanguageEntry(
                    language=item.get("language"),
                    container_name=item.get("containerName"),
                    opentelemetry_preconfigured=bool(item.get("opentelemetryPreconfigured", False)),
                )
                for item in languages
                if isinstance(item, Mapping)
            )
        )

    if isinstance(applications, list):
        return ApplicationDetection(
            entries=tuple(
                ApplicationEntry(
                    application=item.get("application"),
                    container_name=item.get("containerName"),
                )
                for item in applications
                if isinstance(item, Mapping)
            )
        )

    return NoDetection()
