"""
Annotate-and-confirm operations.

For every item of a batch::

    Validated → Mutated → AwaitingConfirmation → Confirmed | TimedOut

1. The whole batch is validated before any write.
2. One :class:`~ezkonnect.core.deadline.Deadline` is created for the batch.
3. Items run one after another: open the confirmation watch, read the
   workload, merge the annotation delta, replace the workload, then
   wait for the InstrumentedApplication to change.
4. The first cluster error or timeout ends the batch.  Items already
   confirmed, and the mutation of the failing item itself, stay
   applied; there is no compensation and no retry.  Re-sending the
   batch is safe because applying a delta twice yields the same
   annotations.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ezkonnect.core.deadline import Deadline
from ezkonnect.core.errors import ConfirmationTimeoutError, EzkonnectError
from ezkonnect.core.logging import get_logger
from ezkonnect.k8s.watch import FIELD_SPEC, FIELD_STATUS, ConfirmationOutcome, ConfirmationWatch
from ezkonnect.k8s.workloads import WorkloadAccessor, apply_annotations
from ezkonnect.ops.annotations import AnnotationDelta, logs_delta, traces_delta
from ezkonnect.ops.context import OperationContext
from ezkonnect.ops.requests import LogsAnnotationRequest, TracesAnnotationRequest
from ezkonnect.ops.responses import AnnotationResult
from ezkonnect.ops.result import OperationResult, start_timer
from ezkonnect.ops.validation import validate_logs_requests, validate_traces_requests

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class _PlannedItem:
    name: str
    controller_kind: str
    namespace: str
    delta: AnnotationDelta


def annotate_traces(
    ctx: OperationContext,
    requests: Sequence[TracesAnnotationRequest],
) -> OperationResult[list[AnnotationResult]]:
    """Toggle trace instrumentation and wait for the operator to update ``status``."""
    timer = start_timer()
    try:
        validate_traces_requests(requests)
        plan = [
            _PlannedItem(
                name=r.name,
                controller_kind=r.controller_kind.lower(),
                namespace=r.namespace,
                delta=traces_delta(r.action, r.service_name),
            )
            for r in requests
        ]
        results = _annotate_and_confirm(ctx, plan, FIELD_STATUS)
    except EzkonnectError as exc:
        logger.error("annotate_traces_failed", **exc.to_dict())
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", error=str(exc))
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    return OperationResult.ok(results, elapsed_ms=timer.elapsed_ms)


def annotate_logs(
    ctx: OperationContext,
    requests: Sequence[LogsAnnotationRequest],
) -> OperationResult[list[AnnotationResult]]:
    """Set or clear the log type and wait for the operator to update ``spec``."""
    timer = start_timer()
    try:
        validate_logs_requests(requests)
        plan = [
            _PlannedItem(
                name=r.name,
                controller_kind=r.controller_kind.lower(),
                namespace=r.namespace,
                delta=logs_delta(r.log_type),
            )
            for r in requests
        ]
        results = _annotate_and_confirm(ctx, plan, FIELD_SPEC)
    except EzkonnectError as exc:
        logger.error("annotate_logs_failed", **exc.to_dict())
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", error=str(exc))
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    return OperationResult.ok(results, elapsed_ms=timer.elapsed_ms)


def _annotate_and_confirm(
    ctx: OperationContext,
    plan: Sequence[_PlannedItem],
    field: str,
) -> list[AnnotationResult]:
    if not plan:
        return []

    accessor = WorkloadAccessor(ctx.cluster.apps)
    deadline = Deadline.after(ctx.request_timeout_seconds)
    results: list[AnnotationResult] = []
    logger.info(
        "annotate_batch_started",
        request_id=ctx.request_id,
        caller=ctx.caller,
        items=len(plan),
        field=field,
    )

    for item in plan:
        watch = ConfirmationWatch(
            ctx.cluster.custom,
            item.namespace,
            item.name,
            field,
            watch_factory=ctx.cluster.watch_factory,
        )
        watch.start(deadline)
        try:
            logger.info(
                "updating_workload",
                kind=item.controller_kind,
                namespace=item.namespace,
                name=item.name,
            )
            workload = accessor.get(item.controller_kind, item.namespace, item.name)
            apply_annotations(workload, item.delta)
            accessor.update(item.controller_kind, item.namespace, workload)
        except BaseException:
            watch.stop()
            raise

        if watch.wait(deadline) is ConfirmationOutcome.TIMED_OUT:
            raise ConfirmationTimeoutError(item.name, deadline.timeout_seconds).with_context(
                resource=item.controller_kind,
                namespace=item.namespace,
                name=item.name,
                confirmed_items=len(results),
            )

        results.append(
            AnnotationResult(
                name=item.name,
                namespace=item.namespace,
                controller_kind=item.controller_kind,
                updated_annotations=item.delta.updated_annotations(),
            )
        )

    return results
