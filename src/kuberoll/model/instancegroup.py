"""Instance group definitions."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class InstanceGroupRole(str, Enum):
    """Cluster role served by an instance group."""

    BASTION = "Bastion"
    MASTER = "Master"
    NODE = "Node"

    @property
    def rank(self) -> int:
        """Position in the rolling-update order: bastions, masters, nodes."""
        return ROLE_ORDER.index(self)


ROLE_ORDER = [InstanceGroupRole.BASTION, InstanceGroupRole.MASTER, InstanceGroupRole.NODE]


class InstanceGroup(BaseModel):
    """Desired shape of one named group of instances."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    role: InstanceGroupRole = InstanceGroupRole.NODE
    min_size: int = Field(default=1, alias="minSize", ge=0)
    max_size: int = Field(default=1, alias="maxSize", ge=0)
    cloud_group_name: Optional[str] = Field(default=None, alias="cloudGroupName")

    @model_validator(mode="after")
    def _check_bounds(self) -> "InstanceGroup":
        if self.max_size < self.min_size:
            raise ValueError(
                f"maxSize ({self.max_size}) is smaller than minSize ({self.min_size})"
            )
        return self

    def cloud_name(self, cluster_name: str) -> str:
        """Name of the cloud group backing this instance group."""
        return self.cloud_group_name or f"{self.name}.{cluster_name}"
