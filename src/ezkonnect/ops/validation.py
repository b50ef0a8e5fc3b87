"""
Validation of annotate batches.

A batch is checked as a whole before anything is written to the
cluster: one bad item rejects every item.  The accepted values are
immutable sets; membership is case-insensitive.
"""

from __future__ import annotations

from collections.abc import Sequence

from ezkonnect.core.errors import ValidationError
from ezkonnect.k8s.workloads import KIND_DEPLOYMENT, KIND_STATEFULSET
from ezkonnect.ops.requests import LogsAnnotationRequest, TracesAnnotationRequest

ACTION_ADD = "add"
ACTION_DELETE = "delete"

VALID_KINDS = frozenset({KIND_DEPLOYMENT, KIND_STATEFULSET})
VALID_ACTIONS = frozenset({ACTION_ADD, ACTION_DELETE})


def is_valid_kind(kind: str) -> bool:
    return isinstance(kind, str) and kind.lower() in VALID_KINDS


def is_valid_action(action: str) -> bool:
    return isinstance(action, str) and action.lower() in VALID_ACTIONS


def validate_traces_requests(requests: Sequence[TracesAnnotationRequest]) -> None:
    """Raise :class:`ValidationError` for the first item with a bad kind or action."""
    for index, request in enumerate(requests):
        _check_kind(index, request.controller_kind)
        if not is_valid_action(request.action):
            raise ValidationError(
                f"Invalid input: action {request.action!r} of item {index} is not one of "
                f"{sorted(VALID_ACTIONS)}",
                field="action",
                value=request.action,
                index=index,
            )


def validate_logs_requests(requests: Sequence[LogsAnnotationRequest]) -> None:
    """Raise :class:`ValidationError` for the first item with a bad kind."""
    for index, request in enumerate(requests):
        _check_kind(index, request.controller_kind)


def _check_kind(index: int, kind: str) -> None:
    if not is_valid_kind(kind):
        raise ValidationError(
            f"Invalid input: controller_kind {kind!r} of item {index} is not one of "
            f"{sorted(VALID_KINDS)}",
            field="controller_kind",
            value=kind,
            index=index,
        )
