"""Cluster API interface consumed by the rolling-update engine."""

from abc import ABC, abstractmethod
from typing import List

from ..model.cluster import ClusterHealth, ClusterNode, PodInfo


class ClusterAPI(ABC):
    """Node and pod operations used for draining and validation.

    Implementations raise ClusterAPIError when the API cannot be queried.
    """

    @abstractmethod
    def list_nodes(self) -> List[ClusterNode]:
        """List every node registered with the cluster."""

    @abstractmethod
    def list_pods(self, node_name: str) -> List[PodInfo]:
        """List pods bound to a node, across all namespaces."""

    @abstractmethod
    def cordon(self, node: ClusterNode) -> None:
        """Mark a node unschedulable."""

    @abstractmethod
    def evict_pod(self, pod: PodInfo) -> bool:
        """Request eviction of a pod.

        Returns False when the eviction was refused, for instance because a
        PodDisruptionBudget does not allow it right now.
        """

    @abstractmethod
    def get_health(self) -> ClusterHealth:
        """Take a fresh snapshot of nodes and system-namespace pods."""
