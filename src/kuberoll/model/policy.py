"""Run-scoped rolling-update policy."""

from typing import List

from pydantic import BaseModel, Field

from .instancegroup import InstanceGroupRole

DEFAULT_MASTER_INTERVAL = 5 * 60.0
DEFAULT_NODE_INTERVAL = 4 * 60.0
DEFAULT_BASTION_INTERVAL = 5 * 60.0
DEFAULT_DRAIN_INTERVAL = 90.0
DEFAULT_VALIDATION_POLL_INTERVAL = 10.0
DEFAULT_DRAIN_POLL_INTERVAL = 5.0


class UpdatePolicy(BaseModel):
    """Flags and intervals governing a single rolling update.

    Intervals are in seconds. The group interval is both the pause after a
    termination and the deadline for the following validation.
    """

    yes: bool = False
    force: bool = False
    cloud_only: bool = False
    fail_on_drain_error: bool = False
    fail_on_validate: bool = True
    drain_and_validate: bool = True

    bastion_interval: float = Field(default=DEFAULT_BASTION_INTERVAL, ge=0)
    master_interval: float = Field(default=DEFAULT_MASTER_INTERVAL, ge=0)
    node_interval: float = Field(default=DEFAULT_NODE_INTERVAL, ge=0)
    drain_interval: float = Field(default=DEFAULT_DRAIN_INTERVAL, ge=0)
    validation_poll_interval: float = Field(default=DEFAULT_VALIDATION_POLL_INTERVAL, gt=0)
    drain_poll_interval: float = Field(default=DEFAULT_DRAIN_POLL_INTERVAL, gt=0)

    instance_groups: List[str] = Field(default_factory=list)

    def interval_for(self, role: InstanceGroupRole) -> float:
        """Wait applied after terminating an instance of the given role."""
        return {
            InstanceGroupRole.BASTION: self.bastion_interval,
            InstanceGroupRole.MASTER: self.master_interval,
            InstanceGroupRole.NODE: self.node_interval,
        }[role]
