"""
Annotate router — toggle instrumentation on workloads.

Endpoints:
    POST /annotate/traces    Enable or roll back trace instrumentation
    POST /annotate/logs      Set or clear the log type

Both endpoints take a JSON array and answer only after the companion
operator has reacted to every item, or fail with 500 on the first item
it did not react to in time.
"""

from __future__ import annotations

from fastapi import APIRouter

from ezkonnect.api.deps import OpContext
from ezkonnect.api.schemas.common import ErrorBody
from ezkonnect.api.schemas.domains import (
    AnnotationResultSchema,
    LogsAnnotationItem,
    TracesAnnotationItem,
)
from ezkonnect.api.utils import _dc, _handle_error

router = APIRouter(prefix="/annotate")

_ERRORS = {400: {"model": ErrorBody}, 500: {"model": ErrorBody}}


@router.post("/traces", response_model=list[AnnotationResultSchema], responses=_ERRORS)
def annotate_traces(items: list[TracesAnnotationItem], ctx: OpContext):
    """Enable (``add``) or roll back (``delete``) trace instrumentation.

    Example:
        POST /api/v1/annotate/traces
        [{"name": "checkout", "controller_kind": "deployment",
          "namespace": "shop", "action": "add", "service_name": "checkout"}]

        Response:
        [{"name": "checkout", "namespace": "shop", "controller_kind": "deployment",
          "updated_annotations": {"logz.io/traces_instrument": "true",
                                  "logz.io/service-name": "checkout"}}]
    """
    from ezkonnect.ops.annotate import annotate_traces as _annotate

    result = _annotate(ctx, [item.to_request() for item in items])
    if not result.success:
        return _handle_error(result)
    return [AnnotationResultSchema(**_dc(r)) for r in (result.data or [])]


@router.post("/logs", response_model=list[AnnotationResultSchema], responses=_ERRORS)
def annotate_logs(items: list[LogsAnnotationItem], ctx: OpContext):
    """Set the log type of each workload; ``""`` removes the annotation.

    Example:
        POST /api/v1/annotate/logs
        [{"name": "checkout", "controller_kind": "deployment",
          "namespace": "shop", "log_type": "nginx"}]
    """
    from ezkonnect.ops.annotate import annotate_logs as _annotate

    result = _annotate(ctx, [item.to_request() for item in items])
    if not result.success:
        return _handle_error(result)
    return [AnnotationResultSchema(**_dc(r)) for r in (result.data or [])]
