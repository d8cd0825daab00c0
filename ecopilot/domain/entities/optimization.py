"""
Domain Entities - Optimization

This module defines the optimization lifecycle: the request raised when a
day breaches its threshold, the remediation decision, the execution result
and the state record that moves through the lifecycle.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from ecopilot.domain.entities.errors import InvalidStateTransitionError


class OptimizationStatus(str, Enum):
    """Lifecycle status, declared in forward order."""

    RECEIVED = "RECEIVED"
    ANALYZING = "ANALYZING"
    DECIDED = "DECIDED"
    EXECUTING = "EXECUTING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def rank(self) -> int:
        # COMPLETED and FAILED share the terminal rank
        return min(_STATUS_ORDER.index(self), _TERMINAL_RANK)

    @property
    def is_terminal(self) -> bool:
        return self in (OptimizationStatus.COMPLETED, OptimizationStatus.FAILED)

    @property
    def progress(self) -> int:
        """Percentage shown on the live status channel."""
        return _PROGRESS[self]


_STATUS_ORDER = list(OptimizationStatus)
_TERMINAL_RANK = _STATUS_ORDER.index(OptimizationStatus.COMPLETED)
_PROGRESS = {
    OptimizationStatus.RECEIVED: 10,
    OptimizationStatus.ANALYZING: 30,
    OptimizationStatus.DECIDED: 60,
    OptimizationStatus.EXECUTING: 80,
    OptimizationStatus.COMPLETED: 100,
    OptimizationStatus.FAILED: 100,
}


class OptimizationAction(str, Enum):
    """Remediation kinds a decision may recommend."""

    SHIFT_LOAD = "SHIFT_LOAD"
    REDUCE_CONSUMPTION = "REDUCE_CONSUMPTION"
    OPTIMIZE_SCHEDULING = "OPTIMIZE_SCHEDULING"


class DecisionSource(str, Enum):
    AI = "ai"
    FALLBACK = "fallback"


@dataclass
class Decision:
    """Remediation decision produced by the decision engine."""

    action: OptimizationAction
    target_window: str
    expected_savings_percent: float
    confidence: float
    reasoning: str
    source: DecisionSource
    model: Optional[str] = None


@dataclass
class ExecutionResult:
    success: bool
    applied_at: datetime
    details: str


@dataclass
class OptimizationRequest:
    """Emitted once per day when consumption breaches the daily maximum."""

    optimization_id: str
    date: str
    total_consumption: float
    threshold: float
    excess_amount: float
    triggered_at: datetime


@dataclass
class ExecutionRequest:
    """Handed to the executor once a decision has been made."""

    optimization_id: str
    decision: Decision
    triggered_at: datetime


@dataclass
class OptimizationState:
    """
    Lifecycle record of one optimization.

    Status only moves forward one step at a time. ``decision`` is present
    from DECIDED onwards; ``execution_result`` and ``completed_at`` only in
    a terminal status.
    """

    id: str
    triggered_at: datetime
    status: OptimizationStatus = OptimizationStatus.RECEIVED
    decision: Optional[Decision] = None
    execution_result: Optional[ExecutionResult] = None
    completed_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def received(cls, request: OptimizationRequest) -> "OptimizationState":
        state = cls(id=request.optimization_id, triggered_at=request.triggered_at)
        state.touch()
        return state

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)

    def advance_to(self, status: OptimizationStatus) -> None:
        """
        Move to the next non-terminal status.

        Raises:
            InvalidStateTransitionError: On skips, backward moves, moves out
                of a terminal status or a DECIDED move without a decision.
        """
        if status.is_terminal:
            raise InvalidStateTransitionError(
                self.id, self.status.value, status.value, "use finish() for terminal"
            )
        self._check_step(status)
        if status is OptimizationStatus.DECIDED and self.decision is None:
            raise InvalidStateTransitionError(
                self.id, self.status.value, status.value, "decision missing"
            )
        self.status = status
        self.touch()

    def decide(self, decision: Decision) -> None:
        """Attach the decision and enter DECIDED."""
        if self.status is not OptimizationStatus.ANALYZING:
            raise InvalidStateTransitionError(
                self.id, self.status.value, OptimizationStatus.DECIDED.value
            )
        self.decision = decision
        self.advance_to(OptimizationStatus.DECIDED)

    def finish(self, result: ExecutionResult) -> None:
        """Terminal write: COMPLETED on success, FAILED otherwise."""
        target = (
            OptimizationStatus.COMPLETED if result.success else OptimizationStatus.FAILED
        )
        self._check_step(target)
        self.status = target
        self.execution_result = result
        self.completed_at = datetime.now(timezone.utc)
        self.touch()

    def _check_step(self, target: OptimizationStatus) -> None:
        if self.is_terminal or target.rank != self.status.rank + 1:
            raise InvalidStateTransitionError(
                self.id, self.status.value, target.value
            )

    def get_duration(self) -> Optional[float]:
        """Seconds from trigger to terminal write, if finished."""
        if self.completed_at is None:
            return None
        return (self.completed_at - self.triggered_at).total_seconds()
