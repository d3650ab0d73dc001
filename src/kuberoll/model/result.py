"""Rolling-update progress and outcome models."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class InstanceState(str, Enum):
    """Per-instance rolling-update states."""

    PENDING = "Pending"
    DRAINING = "Draining"
    TERMINATING = "Terminating"
    AWAITING_REPLACEMENT = "AwaitingReplacement"
    VALIDATING = "Validating"
    DONE = "Done"
    FAILED = "Failed"


class RunOutcome(str, Enum):
    """How a rolling-update invocation ended."""

    SUCCEEDED = "succeeded"
    NO_UPDATE_REQUIRED = "no_update_required"
    CONFIRMATION_REQUIRED = "confirmation_required"
    FAILED = "failed"


class InstanceProgress(BaseModel):
    """What happened to one instance during the run."""

    group: str
    index: int
    instance_id: str
    state: InstanceState = InstanceState.PENDING
    warnings: List[str] = Field(default_factory=list)


class FailurePoint(BaseModel):
    """Where a run stopped: group, 1-based instance index and state reached."""

    group: str
    index: int
    instance_id: str
    state: InstanceState
    message: str


class RollingUpdateResult(BaseModel):
    """Outcome of a rolling-update invocation."""

    outcome: RunOutcome
    instances: List[InstanceProgress] = Field(default_factory=list)
    failure: Optional[FailurePoint] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome != RunOutcome.FAILED

    @property
    def completed(self) -> List[InstanceProgress]:
        return [p for p in self.instances if p.state == InstanceState.DONE]
