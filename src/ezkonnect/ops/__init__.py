"""
Operations layer — the business logic behind every endpoint.

Each public function takes an :class:`~ezkonnect.ops.context.OperationContext`
first and returns an :class:`~ezkonnect.ops.result.OperationResult`.
Routers stay thin: they decode the body, call one operation and turn
the result into a response.

Modules:
    validation   Kind/action validation for annotate batches
    annotations  Annotation policy (feature + action → annotation delta)
    annotate     Annotate-and-confirm orchestration
    state        InstrumentedApplication listing and projection
"""
