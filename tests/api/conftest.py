"""Fixtures for API tests: an app wired to the in-memory cluster."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from ezkonnect.api.app import create_app
from ezkonnect.api.deps import get_cluster_factory


@pytest.fixture
def app(settings, fake_cluster):
    application = create_app(settings=settings)
    application.dependency_overrides[get_cluster_factory] = lambda: fake_cluster.clients
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
