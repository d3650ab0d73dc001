"""Kubernetes interaction module."""

from .api import ClusterAPI
from .client import K8sClient
from .cluster import KubectlClusterAPI

__all__ = ["ClusterAPI", "K8sClient", "KubectlClusterAPI"]
