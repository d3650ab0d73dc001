"""Rolling update executor."""

import time
from typing import Callable, List

from ..cloud.base import CloudProvider
from ..errors import (
    DrainError,
    KuberollError,
    RollingUpdateError,
    TerminationError,
    ValidationTimeoutError,
)
from ..model.cloud import CloudInstance, CloudInstanceGroup
from ..model.policy import UpdatePolicy
from ..model.result import (
    FailurePoint,
    InstanceProgress,
    InstanceState,
    RollingUpdateResult,
    RunOutcome,
)
from ..utils.logger import get_logger
from .drain import Drainer
from .validation import ValidationPoller

logger = get_logger(__name__)


def order_groups(groups: List[CloudInstanceGroup]) -> List[CloudInstanceGroup]:
    """Bastions first, then masters, then nodes; stable within a role."""
    return sorted(groups, key=lambda group: group.instance_group.role.rank)


class RollingUpdateCluster:
    """Replaces stale instances one at a time.

    Each instance goes through drain, termination, a pause of the group's
    interval while the replacement boots, and validation bounded by that same
    interval. The next instance is only touched once the previous one is
    done: at most one instance is out of service at any time.
    """

    def __init__(
        self,
        cloud: CloudProvider,
        policy: UpdatePolicy,
        drainer: Drainer,
        poller: ValidationPoller,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.cloud = cloud
        self.policy = policy
        self.drainer = drainer
        self.poller = poller
        self._sleep = sleep

    def rolling_update(self, groups: List[CloudInstanceGroup]) -> RollingUpdateResult:
        """Roll every targeted group; raise RollingUpdateError on a fatal failure."""
        result = RollingUpdateResult(outcome=RunOutcome.SUCCEEDED)

        for group in order_groups(groups):
            self._update_group(group, result)

        logger.info(f"Rolling update completed: {len(result.completed)} instances replaced")
        return result

    def _targets(self, group: CloudInstanceGroup) -> List[CloudInstance]:
        targets = list(group.need_update)
        if self.policy.force:
            targets.extend(group.ready)
        return targets

    def _update_group(self, group: CloudInstanceGroup, result: RollingUpdateResult) -> None:
        targets = self._targets(group)
        if not targets:
            logger.info(f"Instance group {group.name} is up to date")
            return

        interval = self.policy.interval_for(group.instance_group.role)
        logger.info(
            f"Rolling {len(targets)} instance(s) of {group.instance_group.role.value} "
            f"group {group.name}"
        )

        for index, instance in enumerate(targets, start=1):
            progress = InstanceProgress(group=group.name, index=index, instance_id=instance.id)
            result.instances.append(progress)
            self._update_instance(group, instance, interval, progress, result)

    def _update_instance(
        self,
        group: CloudInstanceGroup,
        instance: CloudInstance,
        interval: float,
        progress: InstanceProgress,
        result: RollingUpdateResult,
    ) -> None:
        if instance.node is not None:
            self._advance(progress, InstanceState.DRAINING)
            try:
                self.drainer.drain(instance.node)
            except DrainError as e:
                if self.policy.fail_on_drain_error:
                    self._fail(progress, result, e)
                logger.warning(f"Ignoring drain failure for {instance.id}: {e}")
                progress.warnings.append(str(e))
        else:
            logger.info(f"Instance {instance.id} has no node; not draining")

        self._advance(progress, InstanceState.TERMINATING)
        try:
            self.cloud.terminate_instance(instance)
        except TerminationError as e:
            self._fail(progress, result, e)
        group.mark_terminated(instance.id)

        self._advance(progress, InstanceState.AWAITING_REPLACEMENT)
        logger.info(f"Waiting {interval:g}s for the replacement of {instance.id}")
        self._sleep(interval)

        self._advance(progress, InstanceState.VALIDATING)
        try:
            self.poller.wait_for_healthy(interval)
        except ValidationTimeoutError as e:
            if self.policy.fail_on_validate:
                self._fail(progress, result, e)
            logger.warning(f"Continuing although the cluster did not validate: {e}")
            progress.warnings.append(str(e))

        self._advance(progress, InstanceState.DONE)

    def _advance(self, progress: InstanceProgress, state: InstanceState) -> None:
        logger.debug(f"{progress.group}[{progress.index}] {progress.instance_id}: {state.value}")
        progress.state = state

    def _fail(
        self, progress: InstanceProgress, result: RollingUpdateResult, error: KuberollError
    ) -> None:
        failure = FailurePoint(
            group=progress.group,
            index=progress.index,
            instance_id=progress.instance_id,
            state=progress.state,
            message=str(error),
        )
        progress.state = InstanceState.FAILED
        result.outcome = RunOutcome.FAILED
        result.failure = failure
        logger.error(f"Rolling update aborted: {error}")
        raise RollingUpdateError(failure, result) from error
