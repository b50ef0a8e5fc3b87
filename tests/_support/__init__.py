"""
Test support utilities for ezkonnect tests.

Builders for Kubernetes objects and an in-memory stand-in for the
cluster (apps API, custom objects API, watch stream and a minimal
operator that reacts to annotation changes).
"""

from tests._support.fakes import (
    FakeCluster,
    FakeWatch,
    instrumented_app,
    make_deployment,
    make_statefulset,
)

__all__ = [
    "FakeCluster",
    "FakeWatch",
    "instrumented_app",
    "make_deployment",
    "make_statefulset",
]
