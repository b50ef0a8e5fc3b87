"""
Cluster credential resolution and API client construction.

Resolution order:
    1. The local kubeconfig file, when it exists (developer machines)
    2. In-cluster service account credentials (the deployed pod)

A fresh :class:`ClusterClients` bundle is created per request and
closed afterwards, so rotated service-account tokens and edited
kubeconfig files are picked up without a restart.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from kubernetes import client, config, watch
from kubernetes.config.config_exception import ConfigException

from ezkonnect.core.errors import ClusterConfigError
from ezkonnect.core.logging import get_logger

logger = get_logger(__name__)

# InstrumentedApplication custom resource, served by the companion operator
RESOURCE_GROUP = "logz.io"
RESOURCE_VERSION = "v1alpha1"
RESOURCE_PLURAL = "instrumentedapplications"


@dataclass
class ClusterClients:
    """Typed API handles sharing one underlying ``ApiClient``."""

    api_client: client.ApiClient
    apps: client.AppsV1Api
    custom: client.CustomObjectsApi
    watch_factory: Callable[[], watch.Watch] = field(default=watch.Watch)

    @classmethod
    def from_api_client(cls, api_client: client.ApiClient) -> ClusterClients:
        return cls(
            api_client=api_client,
            apps=client.AppsV1Api(api_client),
            custom=client.CustomObjectsApi(api_client),
        )

    def server_version(self) -> str:
        """Ask the API server for its version; raises when unreachable."""
        info = client.VersionApi(self.api_client).get_code()
        return info.git_version

    def close(self) -> None:
        self.api_client.close()


def load_api_client(kubeconfig: Path) -> client.ApiClient:
    """Build an ``ApiClient`` from the kubeconfig file or in-cluster credentials."""
    try:
        if kubeconfig.expanduser().is_file():
            logger.debug("cluster_config_loaded", source="kubeconfig", path=str(kubeconfig))
            return config.new_client_from_config(config_file=str(kubeconfig.expanduser()))

        configuration = client.Configuration()
        config.load_incluster_config(client_configuration=configuration)
        logger.debug("cluster_config_loaded", source="in-cluster")
        return client.ApiClient(configuration)
    except ConfigException as exc:
        raise ClusterConfigError(f"Error getting Kubernetes config {exc}", cause=exc) from exc


def create_cluster_clients(kubeconfig: Path) -> ClusterClients:
    """Resolve credentials and return the API handles the ops layer needs."""
    return ClusterClients.from_api_client(load_api_client(kubeconfig))
