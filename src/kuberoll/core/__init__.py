"""Core rolling-update engine."""

from .access import ClusterAccess, CloudOnly, WithClusterAPI
from .drain import DrainCoordinator, Drainer, SkipDrain
from .executor import RollingUpdateCluster, order_groups
from .plan import PlanDecision, UpdatePlan, build_plan
from .service import RollingUpdateService
from .snapshot import build_snapshot, classify, select_instance_groups
from .validation import (
    ClusterHealthPoller,
    ClusterValidator,
    SkipValidation,
    ValidationPoller,
    ValidationResult,
)

__all__ = [
    "ClusterAccess",
    "CloudOnly",
    "WithClusterAPI",
    "DrainCoordinator",
    "Drainer",
    "SkipDrain",
    "RollingUpdateCluster",
    "order_groups",
    "PlanDecision",
    "UpdatePlan",
    "build_plan",
    "RollingUpdateService",
    "build_snapshot",
    "classify",
    "select_instance_groups",
    "ClusterHealthPoller",
    "ClusterValidator",
    "SkipValidation",
    "ValidationPoller",
    "ValidationResult",
]
