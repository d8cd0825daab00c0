"""
Application Use Cases - Optimization Workflow

Owns an optimization's lifecycle from the breach signal up to dispatching
execution:

    RECEIVED -> ANALYZING -> DECIDED -> EXECUTING

Every transition is persisted, logged and mirrored to the live status
channel before the next one starts. The terminal write belongs to the
executor.
"""

import structlog

from ecopilot.application.use_cases.decision_use_case import DecisionEngine
from ecopilot.domain.entities.errors import InvalidStateTransitionError
from ecopilot.domain.entities.optimization import (
    ExecutionRequest,
    OptimizationRequest,
    OptimizationState,
    OptimizationStatus,
)
from ecopilot.domain.ports.event_publishers import IExecutionDispatcher
from ecopilot.domain.ports.status_publisher import IStatusPublisher
from ecopilot.domain.repositories.optimization_repository import IOptimizationRepository

logger = structlog.get_logger(__name__)


class OptimizationWorkflowUseCase:
    """Lifecycle orchestrator."""

    def __init__(
        self,
        optimization_repository: IOptimizationRepository,
        decision_engine: DecisionEngine,
        execution_dispatcher: IExecutionDispatcher,
        status_publisher: IStatusPublisher,
    ):
        self.optimization_repository = optimization_repository
        self.decision_engine = decision_engine
        self.execution_dispatcher = execution_dispatcher
        self.status_publisher = status_publisher

    async def on_optimization_required(
        self, request: OptimizationRequest
    ) -> OptimizationState:
        """
        Drive one optimization up to execution dispatch.

        A redelivered request resumes from the stored status; a request
        whose optimization is already terminal is ignored. Errors from the
        decision engine or storage propagate for redelivery.
        """
        logger.info(
            "workflow.started",
            optimization_id=request.optimization_id,
            date=request.date,
            total_consumption=request.total_consumption,
            threshold=request.threshold,
            excess_amount=request.excess_amount,
        )

        state = await self._load_or_receive(request)
        if state.is_terminal:
            logger.info(
                "workflow.already_finished",
                optimization_id=state.id,
                status=state.status.value,
            )
            return state

        if state.status is OptimizationStatus.RECEIVED:
            await self._transition(state, OptimizationStatus.ANALYZING)

        if state.status is OptimizationStatus.ANALYZING:
            decision = await self.decision_engine.decide(
                request.total_consumption,
                request.threshold,
                request.excess_amount,
                request.date,
            )
            logger.info(
                "workflow.analysis_complete",
                optimization_id=state.id,
                recommendation=decision.action.value,
                expected_savings=decision.expected_savings_percent,
                source=decision.source.value,
            )
            state.decide(decision)
            await self._persist(state)

        if state.status is OptimizationStatus.DECIDED:
            await self._transition(state, OptimizationStatus.EXECUTING)

        if state.decision is None:
            raise InvalidStateTransitionError(
                state.id,
                state.status.value,
                OptimizationStatus.EXECUTING.value,
                "no decision recorded",
            )
        task_id = await self.execution_dispatcher.dispatch_execution(
            ExecutionRequest(
                optimization_id=state.id,
                decision=state.decision,
                triggered_at=state.triggered_at,
            )
        )
        logger.info(
            "workflow.execution_dispatched",
            optimization_id=state.id,
            task_id=task_id,
            action=state.decision.action.value,
        )
        return state

    async def _load_or_receive(self, request: OptimizationRequest) -> OptimizationState:
        state = OptimizationState.received(request)
        if await self.optimization_repository.create(state):
            await self._announce(state)
            return state

        existing = await self.optimization_repository.get_by_id(request.optimization_id)
        if existing is None:
            # create() refused but nothing is stored: a storage inconsistency
            raise RuntimeError(
                f"Optimization {request.optimization_id} could not be created"
            )
        logger.info(
            "workflow.resuming",
            optimization_id=existing.id,
            status=existing.status.value,
        )
        return existing

    async def _transition(
        self, state: OptimizationState, status: OptimizationStatus
    ) -> None:
        state.advance_to(status)
        await self._persist(state)

    async def _persist(self, state: OptimizationState) -> None:
        await self.optimization_repository.save(state)
        await self._announce(state)

    async def _announce(self, state: OptimizationState) -> None:
        logger.info(
            "workflow.state_transition",
            optimization_id=state.id,
            status=state.status.value,
            decision=state.decision.action.value if state.decision else None,
        )
        await self.status_publisher.publish(state)
