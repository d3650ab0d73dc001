"""Exceptions raised by the rolling-update engine."""

from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .model.result import FailurePoint, RollingUpdateResult


class KuberollError(Exception):
    """Base class for all kuberoll errors."""


class ConfigError(KuberollError):
    """The cluster definition or a command line value is invalid."""


class NotFoundError(KuberollError):
    """A requested instance group does not exist."""

    def __init__(self, name: str):
        super().__init__(f'InstanceGroup "{name}" not found')
        self.name = name


class ClusterAPIError(KuberollError):
    """A Kubernetes API call made through kubectl failed."""


class CloudAPIError(KuberollError):
    """The cloud provider could not describe the cluster's instance groups."""


class ClusterUnreachableError(KuberollError):
    """The Kubernetes API could not be queried."""

    GUIDANCE = (
        "Unable to reach the kubernetes API. "
        "Use --cloudonly to do a rolling-update without confirming progress with the k8s API"
    )

    def __init__(self, detail: str):
        super().__init__(f"error listing nodes in cluster: {detail}")
        self.detail = detail


class DrainError(KuberollError):
    """Pods could not be evicted from a node within the drain interval."""

    def __init__(self, node_name: str, pods: Optional[List[str]] = None, reason: str = ""):
        self.node_name = node_name
        self.pods = list(pods or [])
        if not reason:
            reason = f"{len(self.pods)} pod(s) not evicted: {', '.join(self.pods)}"
        super().__init__(f"failed to drain node {node_name}: {reason}")


class ValidationTimeoutError(KuberollError):
    """The cluster did not report healthy before the deadline."""

    def __init__(self, timeout: float, failures: List[str]):
        self.timeout = timeout
        self.failures = list(failures)
        detail = "; ".join(self.failures) or "no health report received"
        super().__init__(f"cluster did not validate within {timeout:g}s: {detail}")


class TerminationError(KuberollError):
    """The cloud provider rejected an instance termination."""

    def __init__(self, instance_id: str, detail: str):
        super().__init__(f"error terminating instance {instance_id}: {detail}")
        self.instance_id = instance_id
        self.detail = detail


class RollingUpdateError(KuberollError):
    """A rolling update stopped part way through.

    Instances replaced before the failure stay replaced; ``failure`` names the
    group, the 1-based instance index and the state reached so the operator can
    resume with a narrowed ``--instance-group`` filter.
    """

    def __init__(self, failure: "FailurePoint", result: "RollingUpdateResult"):
        self.failure = failure
        self.result = result
        super().__init__(
            f"rolling update of {failure.group} stopped at instance {failure.index} "
            f"({failure.instance_id}) in state {failure.state.value}: {failure.message}"
        )
