"""Rolling update service tying snapshot, plan and executor together."""

import time
from typing import Callable, List, Optional, Sequence

from ..cloud.base import CloudProvider
from ..model.cloud import CloudInstanceGroup
from ..model.instancegroup import InstanceGroup
from ..model.policy import UpdatePolicy
from ..model.result import RollingUpdateResult, RunOutcome
from ..utils.logger import get_logger
from .access import ClusterAccess
from .executor import RollingUpdateCluster
from .plan import PlanDecision, build_plan
from .snapshot import build_snapshot

logger = get_logger(__name__)


class RollingUpdateService:
    """High-level entry point for one rolling-update invocation."""

    def __init__(
        self,
        cluster_name: str,
        cloud: CloudProvider,
        access: ClusterAccess,
        policy: UpdatePolicy,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.cluster_name = cluster_name
        self.cloud = cloud
        self.access = access
        self.policy = policy
        self._sleep = sleep

    def run(
        self,
        instance_groups: Sequence[InstanceGroup],
        on_snapshot: Optional[Callable[[List[CloudInstanceGroup]], None]] = None,
    ) -> RollingUpdateResult:
        """Snapshot the cluster, apply the go/no-go gates, then roll.

        ``on_snapshot`` receives the classified groups before any decision is
        taken, for display.
        """
        logger.info(f"Starting rolling update for cluster {self.cluster_name}")

        groups = build_snapshot(
            self.cluster_name,
            instance_groups,
            self.cloud,
            self.access,
            names=self.policy.instance_groups,
        )
        if on_snapshot:
            on_snapshot(groups)

        plan = build_plan(groups, self.policy)
        if plan.decision == PlanDecision.NO_UPDATE_REQUIRED:
            logger.info("No rolling-update required")
            return RollingUpdateResult(outcome=RunOutcome.NO_UPDATE_REQUIRED)
        if plan.decision == PlanDecision.CONFIRMATION_REQUIRED:
            logger.info("Rolling update needs confirmation")
            return RollingUpdateResult(outcome=RunOutcome.CONFIRMATION_REQUIRED)

        executor = RollingUpdateCluster(
            self.cloud,
            self.policy,
            drainer=self.access.drainer(self.policy),
            poller=self.access.validation_poller(self.policy, instance_groups),
            sleep=self._sleep,
        )
        return executor.rolling_update(plan.groups)
