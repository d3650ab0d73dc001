"""Cloud topology models."""

from typing import List, Optional

from pydantic import BaseModel, Field

from .cluster import ClusterNode
from .instancegroup import InstanceGroup

STATUS_READY = "Ready"
STATUS_NEEDS_UPDATE = "NeedsUpdate"


class CloudInstance(BaseModel):
    """One cloud-managed instance, linked to its node once it has joined."""

    id: str
    fingerprint: str = ""
    node: Optional[ClusterNode] = None


class CloudGroup(BaseModel):
    """A cloud group as described by the provider, before classification."""

    name: str
    fingerprint: str = ""
    min_size: int = 0
    max_size: int = 0
    instances: List[CloudInstance] = Field(default_factory=list)


class CloudInstanceGroup(BaseModel):
    """An instance group paired with the cloud instances currently backing it."""

    instance_group: InstanceGroup
    cloud_group_name: str
    min_size: int = 0
    max_size: int = 0
    ready: List[CloudInstance] = Field(default_factory=list)
    need_update: List[CloudInstance] = Field(default_factory=list)

    @property
    def name(self) -> str:
        return self.instance_group.name

    @property
    def status(self) -> str:
        return STATUS_NEEDS_UPDATE if self.need_update else STATUS_READY

    @property
    def instances(self) -> List[CloudInstance]:
        return self.need_update + self.ready

    @property
    def node_count(self) -> int:
        """Number of instances that have joined the cluster."""
        return sum(1 for instance in self.instances if instance.node is not None)

    def mark_terminated(self, instance_id: str) -> None:
        """Drop a terminated instance so later decisions no longer consider it."""
        self.need_update = [i for i in self.need_update if i.id != instance_id]
        self.ready = [i for i in self.ready if i.id != instance_id]
