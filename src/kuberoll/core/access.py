"""How a run talks to the cluster: through its API, or not at all."""

import time
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence

from ..errors import ClusterAPIError, ClusterUnreachableError
from ..k8s.api import ClusterAPI
from ..model.cluster import ClusterNode
from ..model.instancegroup import InstanceGroup
from ..model.policy import UpdatePolicy
from .drain import DrainCoordinator, Drainer, SkipDrain
from .validation import ClusterHealthPoller, ClusterValidator, SkipValidation, ValidationPoller


class ClusterAccess(ABC):
    """Cluster interaction chosen once, when the run is set up."""

    reports_nodes = False

    @abstractmethod
    def list_nodes(self) -> List[ClusterNode]:
        """Nodes used to link cloud instances to cluster members."""

    @abstractmethod
    def drainer(self, policy: UpdatePolicy) -> Drainer:
        pass

    @abstractmethod
    def validation_poller(
        self, policy: UpdatePolicy, instance_groups: Sequence[InstanceGroup]
    ) -> ValidationPoller:
        pass

    @staticmethod
    def for_policy(policy: UpdatePolicy, api: Optional[ClusterAPI]) -> "ClusterAccess":
        """Pick the access variant matching ``policy.cloud_only``."""
        if policy.cloud_only:
            return CloudOnly()
        if api is None:
            raise ValueError("a cluster API client is required unless running cloud-only")
        return WithClusterAPI(api)


class CloudOnly(ClusterAccess):
    """No cluster API: nothing is drained and nothing is validated."""

    def list_nodes(self) -> List[ClusterNode]:
        return []

    def drainer(self, policy: UpdatePolicy) -> Drainer:
        return SkipDrain("cloud-only run")

    def validation_poller(
        self, policy: UpdatePolicy, instance_groups: Sequence[InstanceGroup]
    ) -> ValidationPoller:
        return SkipValidation("cloud-only run")


class WithClusterAPI(ClusterAccess):
    """Nodes are drained and the cluster validated through its API."""

    reports_nodes = True

    def __init__(
        self,
        api: ClusterAPI,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.api = api
        self._sleep = sleep
        self._clock = clock

    def list_nodes(self) -> List[ClusterNode]:
        try:
            return self.api.list_nodes()
        except ClusterAPIError as e:
            raise ClusterUnreachableError(str(e)) from e

    def drainer(self, policy: UpdatePolicy) -> Drainer:
        if not policy.drain_and_validate:
            return SkipDrain("drain and validate disabled")
        return DrainCoordinator(
            self.api,
            drain_interval=policy.drain_interval,
            poll_interval=policy.drain_poll_interval,
            sleep=self._sleep,
            clock=self._clock,
        )

    def validation_poller(
        self, policy: UpdatePolicy, instance_groups: Sequence[InstanceGroup]
    ) -> ValidationPoller:
        if not policy.drain_and_validate:
            return SkipValidation("drain and validate disabled")
        return ClusterHealthPoller(
            self.api,
            ClusterValidator(instance_groups),
            poll_interval=policy.validation_poll_interval,
            sleep=self._sleep,
        )
