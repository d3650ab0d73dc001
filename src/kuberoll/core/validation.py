"""Cluster validation after an instance has been replaced."""

import math
import time
from abc import ABC, abstractmethod
from typing import Callable, List, Sequence

from pydantic import BaseModel, Field
from tenacity import (
    Retrying,
    retry_if_result,
    stop_after_attempt,
    stop_after_delay,
    wait_fixed,
)

from ..errors import ClusterAPIError, ValidationTimeoutError
from ..k8s.api import ClusterAPI
from ..model.cluster import SYSTEM_NAMESPACE, ClusterHealth
from ..model.instancegroup import InstanceGroup, InstanceGroupRole
from ..model.policy import DEFAULT_VALIDATION_POLL_INTERVAL
from ..utils.logger import get_logger

logger = get_logger(__name__)


class ValidationResult(BaseModel):
    """Problems found by one health check; empty means healthy."""

    failures: List[str] = Field(default_factory=list)

    @property
    def healthy(self) -> bool:
        return not self.failures


class ClusterValidator:
    """Judges a health observation against the declared instance groups."""

    def __init__(self, instance_groups: Sequence[InstanceGroup]):
        self.expected_masters = sum(
            g.min_size for g in instance_groups if g.role == InstanceGroupRole.MASTER
        )
        self.expected_nodes = sum(
            g.min_size for g in instance_groups if g.role == InstanceGroupRole.NODE
        )

    def validate(self, health: ClusterHealth) -> ValidationResult:
        failures = []

        ready_masters = sum(1 for n in health.nodes if n.is_master and n.ready)
        ready_nodes = sum(1 for n in health.nodes if not n.is_master and n.ready)
        if ready_masters < self.expected_masters:
            failures.append(f"{ready_masters} of {self.expected_masters} masters ready")
        if ready_nodes < self.expected_nodes:
            failures.append(f"{ready_nodes} of {self.expected_nodes} nodes ready")

        for node in health.nodes:
            if not node.ready:
                failures.append(f"node {node.name} is not ready")

        for pod in health.system_pods:
            if not pod.healthy:
                failures.append(f"{SYSTEM_NAMESPACE} pod {pod.name} is {pod.phase}")

        return ValidationResult(failures=failures)


class ValidationPoller(ABC):
    """Waits for the cluster to report healthy."""

    @abstractmethod
    def wait_for_healthy(self, timeout: float) -> None:
        """Raise ValidationTimeoutError if the cluster is not healthy in time."""


class SkipValidation(ValidationPoller):
    """Poller used when the cluster API is not consulted."""

    def __init__(self, reason: str):
        self.reason = reason

    def wait_for_healthy(self, timeout: float) -> None:
        logger.info(f"Not validating cluster: {self.reason}")


class ClusterHealthPoller(ValidationPoller):
    """Polls the cluster API with a fixed cadence until healthy or out of time."""

    def __init__(
        self,
        api: ClusterAPI,
        validator: ClusterValidator,
        poll_interval: float = DEFAULT_VALIDATION_POLL_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.api = api
        self.validator = validator
        self.poll_interval = poll_interval
        self._sleep = sleep

    def check(self) -> ValidationResult:
        """Run a single, uncached health check."""
        try:
            health = self.api.get_health()
        except ClusterAPIError as e:
            return ValidationResult(failures=[f"cluster API query failed: {e}"])
        return self.validator.validate(health)

    def wait_for_healthy(self, timeout: float) -> None:
        attempts = int(math.ceil(timeout / self.poll_interval)) + 1

        def _log_attempt(retry_state) -> None:
            result = retry_state.outcome.result()
            logger.info(
                f"Cluster did not pass validation (attempt {retry_state.attempt_number}): "
                f"{'; '.join(result.failures)}"
            )

        retryer = Retrying(
            stop=stop_after_attempt(attempts) | stop_after_delay(timeout),
            wait=wait_fixed(self.poll_interval),
            retry=retry_if_result(lambda result: not result.healthy),
            sleep=self._sleep,
            after=_log_attempt,
            retry_error_callback=lambda retry_state: retry_state.outcome.result(),
        )
        result = retryer(self.check)

        if not result.healthy:
            raise ValidationTimeoutError(timeout, result.failures)
        logger.info("Cluster validated")
