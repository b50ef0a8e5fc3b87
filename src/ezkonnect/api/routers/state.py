"""
State router — read the instrumentation state of every workload.

Endpoints:
    GET /state    All InstrumentedApplications, one record per detected container
"""

from __future__ import annotations

from fastapi import APIRouter

from ezkonnect.api.deps import OpContext
from ezkonnect.api.schemas.common import ErrorBody
from ezkonnect.api.schemas.domains import ProjectedRecordSchema
from ezkonnect.api.utils import _dc, _handle_error

router = APIRouter()


@router.get(
    "/state",
    response_model=list[ProjectedRecordSchema],
    responses={500: {"model": ErrorBody}},
)
def get_state(ctx: OpContext):
    """List the projected instrumentation state.

    Example:
        GET /api/v1/state

        Response:
        [
            {
                "name": "deployment-checkout",
                "namespace": "shop",
                "controller_kind": "deployment",
                "container_name": "checkout",
                "traces_instrumented": true,
                "traces_instrumentable": true,
                "service_name": "checkout",
                "application": null,
                "language": "java",
                "detection_status": "Completed",
                "opentelemetry_preconfigured": false,
                "log_type": "nginx"
            }
        ]
    """
    from ezkonnect.ops.state import get_state as _get_state

    result = _get_state(ctx)
    if not result.success:
        return _handle_error(result)
    return [ProjectedRecordSchema(**_dc(r)) for r in (result.data or [])]
