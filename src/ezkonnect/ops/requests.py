"""
Typed request objects for annotate operations.

One object per batch item.  The API layer builds these from the decoded
JSON body; the CLI or tests may build them directly.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TracesAnnotationRequest:
    """Turn trace instrumentation on (``add``) or roll it back (``delete``)."""

    name: str
    controller_kind: str
    namespace: str
    action: str
    service_name: str | None = None


@dataclass(frozen=True, slots=True)
class LogsAnnotationRequest:
    """Set the log type of a workload; an empty ``log_type`` clears it."""

    name: str
    controller_kind: str
    namespace: str
    log_type: str = ""
