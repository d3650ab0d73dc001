"""Decide whether a rolling update should go ahead."""

from enum import Enum
from typing import List

from pydantic import BaseModel

from ..model.cloud import CloudInstanceGroup
from ..model.policy import UpdatePolicy


class PlanDecision(str, Enum):
    PROCEED = "proceed"
    NO_UPDATE_REQUIRED = "no_update_required"
    CONFIRMATION_REQUIRED = "confirmation_required"


class UpdatePlan(BaseModel):
    """Targeted groups and the go/no-go decision for them."""

    groups: List[CloudInstanceGroup]
    need_update: bool
    decision: PlanDecision


def build_plan(groups: List[CloudInstanceGroup], policy: UpdatePolicy) -> UpdatePlan:
    need_update = any(group.need_update for group in groups)

    if not need_update and not policy.force:
        decision = PlanDecision.NO_UPDATE_REQUIRED
    elif not policy.yes:
        decision = PlanDecision.CONFIRMATION_REQUIRED
    else:
        decision = PlanDecision.PROCEED

    return UpdatePlan(groups=groups, need_update=need_update, decision=decision)
