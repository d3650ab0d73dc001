"""Node draining ahead of instance termination."""

import time
from abc import ABC, abstractmethod
from typing import Callable, List, Set

from tenacity import Retrying, retry_if_result

from ..errors import ClusterAPIError, DrainError
from ..k8s.api import ClusterAPI
from ..model.cluster import ClusterNode, PodInfo
from ..model.policy import DEFAULT_DRAIN_POLL_INTERVAL
from ..utils.logger import get_logger

logger = get_logger(__name__)


class Drainer(ABC):
    """Empties a node of workloads before its instance is terminated."""

    @abstractmethod
    def drain(self, node: ClusterNode) -> None:
        """Raise DrainError when the node could not be emptied."""


class SkipDrain(Drainer):
    """Drainer used when the cluster API is not consulted."""

    def __init__(self, reason: str):
        self.reason = reason

    def drain(self, node: ClusterNode) -> None:
        logger.debug(f"Not draining {node.name}: {self.reason}")


class DrainCoordinator(Drainer):
    """Cordons a node and evicts its pods, bounded by the drain interval.

    Evictions go through the eviction API so PodDisruptionBudgets are
    honoured; a refused eviction is re-issued on the next poll until the
    interval runs out. DaemonSet and mirror pods are left alone.
    """

    def __init__(
        self,
        api: ClusterAPI,
        drain_interval: float,
        poll_interval: float = DEFAULT_DRAIN_POLL_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.api = api
        self.drain_interval = drain_interval
        self.poll_interval = poll_interval
        self._sleep = sleep
        self._clock = clock

    def drain(self, node: ClusterNode) -> None:
        logger.info(f"Draining node {node.name}")
        try:
            self.api.cordon(node)
        except ClusterAPIError as e:
            raise DrainError(node.name, reason=str(e)) from e

        deadline = self._clock() + self.drain_interval
        accepted: Set[str] = set()

        def _until_deadline(retry_state) -> float:
            return max(0.0, min(self.poll_interval, deadline - self._clock()))

        def _log_remaining(retry_state) -> None:
            pods = retry_state.outcome.result()
            logger.debug(f"Waiting for {len(pods)} pod(s) to leave {node.name}")

        retryer = Retrying(
            stop=lambda retry_state: self._clock() >= deadline,
            wait=_until_deadline,
            retry=retry_if_result(bool),
            sleep=self._sleep,
            after=_log_remaining,
            retry_error_callback=lambda retry_state: retry_state.outcome.result(),
        )
        remaining = retryer(self._evict_pass, node, accepted)

        if remaining:
            raise DrainError(node.name, [pod.ref for pod in remaining])
        logger.info(f"Node {node.name} drained")

    def _evict_pass(self, node: ClusterNode, accepted: Set[str]) -> List[PodInfo]:
        """Evict what is still on the node; return the pods found there."""
        try:
            pods = [pod for pod in self.api.list_pods(node.name) if pod.evictable]
        except ClusterAPIError as e:
            raise DrainError(node.name, reason=str(e)) from e

        for pod in pods:
            if pod.ref in accepted:
                continue
            if self.api.evict_pod(pod):
                accepted.add(pod.ref)
        return pods
