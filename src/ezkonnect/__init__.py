"""
ezkonnect — control surface for workload observability instrumentation.

Lets an operator toggle distributed tracing and log typing on
Deployments and StatefulSets by annotating their pod templates, and
reports the detection state the companion operator publishes in
``InstrumentedApplication`` custom resources.

Packages:
    core   errors, logging, settings, deadlines, health checks
    k8s    cluster clients, typed custom resource, workloads, confirmation watch
    ops    validation, annotation policy, annotate-and-confirm, state projection
    api    FastAPI app factory, routers, schemas, middleware
    cli    ``ezkonnect serve``
"""

__version__ = "1.0.0"
