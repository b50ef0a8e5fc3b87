"""
Annotation policy: which pod-template annotations a request changes.

    traces  action "add"          logz.io/traces_instrument = "true"
    traces  action "delete"       logz.io/traces_instrument = "rollback"
    traces  service_name given    logz.io/service-name      = the name
    logs    non-empty log_type    logz.io/application_type = the type
    logs    empty log_type        logz.io/application_type removed

The operator reads ``rollback`` as "explicitly reverted", distinct from
a workload that never carried the key.  Clearing the log type removes
the key; it is never set to an empty string.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ezkonnect.ops.validation import ACTION_DELETE

TRACES_INSTRUMENT_ANNOTATION = "logz.io/traces_instrument"
SERVICE_NAME_ANNOTATION = "logz.io/service-name"
LOG_TYPE_ANNOTATION = "logz.io/application_type"

TRACES_ENABLED = "true"
TRACES_ROLLBACK = "rollback"


@dataclass(frozen=True)
class AnnotationDelta:
    """Keys to set and keys to remove on a pod template."""

    set: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    remove: frozenset[str] = frozenset()

    def updated_annotations(self) -> dict[str, str]:
        """What the API reports back: the keys that were set."""
        return dict(self.set)


def traces_delta(action: str, service_name: str | None = None) -> AnnotationDelta:
    value = TRACES_ROLLBACK if action.lower() == ACTION_DELETE else TRACES_ENABLED
    annotations = {TRACES_INSTRUMENT_ANNOTATION: value}
    if service_name:
        annotations[SERVICE_NAME_ANNOTATION] = service_name
    return AnnotationDelta(set=MappingProxyType(annotations))


def logs_delta(log_type: str | None) -> AnnotationDelta:
    if log_type:
        return AnnotationDelta(set=MappingProxyType({LOG_TYPE_ANNOTATION: log_type}))
    return AnnotationDelta(remove=frozenset({LOG_TYPE_ANNOTATION}))
