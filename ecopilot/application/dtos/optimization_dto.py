"""
Application DTOs - Optimization

Event payloads exchanged over the queue (``optimization.required``,
``execution.requested``), the optimization state exposed by the API and the
live status message.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from ecopilot.application.dtos.sensor_dto import CamelModel
from ecopilot.domain.entities.optimization import (
    Decision,
    DecisionSource,
    ExecutionRequest,
    ExecutionResult,
    OptimizationAction,
    OptimizationRequest,
    OptimizationState,
    OptimizationStatus,
)


class DecisionDTO(CamelModel):
    action: OptimizationAction
    target_window: str
    expected_savings_percent: float
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str
    source: DecisionSource
    model: Optional[str] = None

    @classmethod
    def from_entity(cls, decision: Decision) -> "DecisionDTO":
        return cls(
            action=decision.action,
            target_window=decision.target_window,
            expected_savings_percent=decision.expected_savings_percent,
            confidence=decision.confidence,
            reasoning=decision.reasoning,
            source=decision.source,
            model=decision.model,
        )

    def to_entity(self) -> Decision:
        return Decision(
            action=self.action,
            target_window=self.target_window,
            expected_savings_percent=self.expected_savings_percent,
            confidence=self.confidence,
            reasoning=self.reasoning,
            source=self.source,
            model=self.model,
        )


class ExecutionResultDTO(CamelModel):
    success: bool
    applied_at: datetime
    details: str

    @classmethod
    def from_entity(cls, result: ExecutionResult) -> "ExecutionResultDTO":
        return cls(
            success=result.success, applied_at=result.applied_at, details=result.details
        )


class OptimizationRequiredEventDTO(CamelModel):
    """Payload of ``optimization.required``."""

    optimization_id: str
    date: str
    total_consumption: float
    threshold: float
    excess_amount: float = Field(gt=0)
    triggered_at: datetime

    @classmethod
    def from_entity(cls, request: OptimizationRequest) -> "OptimizationRequiredEventDTO":
        return cls(
            optimization_id=request.optimization_id,
            date=request.date,
            total_consumption=request.total_consumption,
            threshold=request.threshold,
            excess_amount=request.excess_amount,
            triggered_at=request.triggered_at,
        )

    def to_entity(self) -> OptimizationRequest:
        return OptimizationRequest(
            optimization_id=self.optimization_id,
            date=self.date,
            total_consumption=self.total_consumption,
            threshold=self.threshold,
            excess_amount=self.excess_amount,
            triggered_at=self.triggered_at,
        )


class ExecutionRequestedEventDTO(CamelModel):
    """Payload of ``execution.requested``."""

    optimization_id: str
    decision: DecisionDTO
    triggered_at: datetime

    @classmethod
    def from_entity(cls, request: ExecutionRequest) -> "ExecutionRequestedEventDTO":
        return cls(
            optimization_id=request.optimization_id,
            decision=DecisionDTO.from_entity(request.decision),
            triggered_at=request.triggered_at,
        )

    def to_entity(self) -> ExecutionRequest:
        return ExecutionRequest(
            optimization_id=self.optimization_id,
            decision=self.decision.to_entity(),
            triggered_at=self.triggered_at,
        )


class OptimizationStateDTO(CamelModel):
    id: str
    status: OptimizationStatus
    triggered_at: datetime
    decision: Optional[DecisionDTO] = None
    execution_result: Optional[ExecutionResultDTO] = None
    completed_at: Optional[datetime] = None
    progress: int

    @classmethod
    def from_entity(cls, state: OptimizationState) -> "OptimizationStateDTO":
        return cls(
            id=state.id,
            status=state.status,
            triggered_at=state.triggered_at,
            decision=DecisionDTO.from_entity(state.decision) if state.decision else None,
            execution_result=(
                ExecutionResultDTO.from_entity(state.execution_result)
                if state.execution_result
                else None
            ),
            completed_at=state.completed_at,
            progress=state.status.progress,
        )


class EnergyStatusDTO(CamelModel):
    """Message mirrored to the live status channel on every transition."""

    id: str
    optimization_id: str
    status: OptimizationStatus
    progress: int = Field(ge=0, le=100)
    decision: Optional[DecisionDTO] = None
    execution_result: Optional[ExecutionResultDTO] = None
    updated_at: datetime

    @classmethod
    def from_entity(cls, state: OptimizationState) -> "EnergyStatusDTO":
        snapshot = OptimizationStateDTO.from_entity(state)
        return cls(
            id=state.id,
            optimization_id=state.id,
            status=state.status,
            progress=state.status.progress,
            decision=snapshot.decision,
            execution_result=snapshot.execution_result,
            updated_at=state.updated_at or datetime.now(timezone.utc),
        )
