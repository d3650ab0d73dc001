"""Cluster-related models."""

from typing import List, Optional

from pydantic import BaseModel, Field

SYSTEM_NAMESPACE = "kube-system"
HEALTHY_POD_PHASES = {"Running", "Succeeded"}


class ClusterNode(BaseModel):
    """A node as reported by the Kubernetes API."""

    name: str
    provider_id: str = ""
    role: str = "node"
    ready: bool = False
    unschedulable: bool = False

    @property
    def instance_id(self) -> str:
        """Cloud instance ID, the last path segment of the provider ID."""
        # aws:///us-east-1a/i-0123456789abcdef0
        return self.provider_id.rstrip("/").rsplit("/", 1)[-1] if self.provider_id else ""

    @property
    def is_master(self) -> bool:
        return self.role == "master"


class PodInfo(BaseModel):
    """A pod scheduled on a node."""

    name: str
    namespace: str
    node_name: Optional[str] = None
    phase: str = "Unknown"
    owner_kinds: List[str] = Field(default_factory=list)
    mirror: bool = False

    @property
    def ref(self) -> str:
        return f"{self.namespace}/{self.name}"

    @property
    def evictable(self) -> bool:
        """DaemonSet and mirror pods are left in place during a drain."""
        return not self.mirror and "DaemonSet" not in self.owner_kinds

    @property
    def healthy(self) -> bool:
        return self.phase in HEALTHY_POD_PHASES


class ClusterHealth(BaseModel):
    """One observation of the cluster, taken by a single health query."""

    nodes: List[ClusterNode] = Field(default_factory=list)
    system_pods: List[PodInfo] = Field(default_factory=list)
