"""Data models for kuberoll."""

from .cloud import (
    STATUS_NEEDS_UPDATE,
    STATUS_READY,
    CloudGroup,
    CloudInstance,
    CloudInstanceGroup,
)
from .cluster import SYSTEM_NAMESPACE, ClusterHealth, ClusterNode, PodInfo
from .instancegroup import ROLE_ORDER, InstanceGroup, InstanceGroupRole
from .policy import UpdatePolicy
from .result import (
    FailurePoint,
    InstanceProgress,
    InstanceState,
    RollingUpdateResult,
    RunOutcome,
)

__all__ = [
    "STATUS_NEEDS_UPDATE",
    "STATUS_READY",
    "CloudGroup",
    "CloudInstance",
    "CloudInstanceGroup",
    "SYSTEM_NAMESPACE",
    "ClusterHealth",
    "ClusterNode",
    "PodInfo",
    "ROLE_ORDER",
    "InstanceGroup",
    "InstanceGroupRole",
    "UpdatePolicy",
    "FailurePoint",
    "InstanceProgress",
    "InstanceState",
    "RollingUpdateResult",
    "RunOutcome",
]
