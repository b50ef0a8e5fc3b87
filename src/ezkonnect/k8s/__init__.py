"""
Kubernetes access layer.

Everything that talks to the API server lives here: credential
resolution, the typed ``InstrumentedApplication`` schema, workload
get/update and the change-confirmation watch.  The ops layer composes
these; nothing in this package knows about HTTP.
"""

from ezkonnect.k8s.client import ClusterClients, create_cluster_clients

__all__ = ["ClusterClients", "create_cluster_clients"]
