"""
Shared pytest fixtures for ezkonnect tests.

This module provides:
- An in-memory cluster (``fake_cluster``) and its API handles (``cluster``)
- An ``OperationContext`` wired to that cluster (``ctx``)
- Settings with a non-existent kubeconfig so nothing reaches a real cluster

Usage:
    def test_something(fake_cluster, ctx):
        fake_cluster.add_workload(make_deployment("checkout"))
        ...
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest

from ezkonnect.api.deps import get_settings
from ezkonnect.core.settings import EzkonnectSettings
from ezkonnect.k8s.client import ClusterClients
from ezkonnect.ops.context import OperationContext
from tests._support import FakeCluster


@pytest.fixture
def fake_cluster() -> FakeCluster:
    return FakeCluster()


@pytest.fixture
def cluster(fake_cluster: FakeCluster) -> ClusterClients:
    return fake_cluster.clients()


@pytest.fixture
def ctx(cluster: ClusterClients) -> OperationContext:
    return OperationContext.for_cluster(cluster, request_timeout_seconds=2, caller="test")


@pytest.fixture
def settings(tmp_path: Path) -> EzkonnectSettings:
    return EzkonnectSettings(
        kubeconfig=tmp_path / "missing-kubeconfig",
        request_timeout_seconds=2,
        log_json=False,
    )


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
