"""Cluster API access"""

from credmode.cluster.client import KubeClusterClient, load_api_client

__all__ = ["KubeClusterClient", "load_api_client"]
