from __future__ import annotations

import pytest

from ecopilot.application.use_cases.decision_use_case import DecisionEngine
from ecopilot.application.use_cases.optimization_workflow_use_case import (
    OptimizationWorkflowUseCase,
)
from ecopilot.domain.entities.errors import InvalidStateTransitionError
from ecopilot.domain.entities.optimization import (
    OptimizationAction,
    OptimizationRequest,
    OptimizationState,
    OptimizationStatus,
)


@pytest.fixture()
def workflow(optimization_repository, execution_dispatcher, status_publisher):
    return OptimizationWorkflowUseCase(
        optimization_repository=optimization_repository,
        decision_engine=DecisionEngine(),
        execution_dispatcher=execution_dispatcher,
        status_publisher=status_publisher,
    )


@pytest.mark.asyncio
async def test_walks_lifecycle_up_to_execution_dispatch(
    workflow,
    sample_request: OptimizationRequest,
    optimization_repository,
    execution_dispatcher,
    status_publisher,
) -> None:
    state = await workflow.on_optimization_required(sample_request)

    assert state.status is OptimizationStatus.EXECUTING
    assert status_publisher.statuses == ["RECEIVED", "ANALYZING", "DECIDED", "EXECUTING"]
    assert [status.value for _, status in optimization_repository.history] == [
        "RECEIVED",
        "ANALYZING",
        "DECIDED",
        "EXECUTING",
    ]

    [request] = execution_dispatcher.requests
    assert request.optimization_id == sample_request.optimization_id
    assert request.decision.action is OptimizationAction.SHIFT_LOAD
    assert request.triggered_at == sample_request.triggered_at

    stored = await optimization_repository.get_by_id(sample_request.optimization_id)
    assert stored.status is OptimizationStatus.EXECUTING
    assert stored.decision == request.decision


@pytest.mark.asyncio
async def test_status_messages_carry_progress(
    workflow, sample_request: OptimizationRequest, status_publisher
) -> None:
    await workflow.on_optimization_required(sample_request)

    assert [m.status.progress for m in status_publisher.messages] == [10, 30, 60, 80]
    assert status_publisher.messages[0].decision is None
    assert status_publisher.messages[2].decision is not None


@pytest.mark.asyncio
async def test_redelivery_resumes_from_stored_status(
    workflow,
    sample_request: OptimizationRequest,
    optimization_repository,
    execution_dispatcher,
) -> None:
    state = OptimizationState.received(sample_request)
    state.advance_to(OptimizationStatus.ANALYZING)
    await optimization_repository.create(state)

    result = await workflow.on_optimization_required(sample_request)

    assert result.status is OptimizationStatus.EXECUTING
    assert len(execution_dispatcher.requests) == 1
    assert [s.value for _, s in optimization_repository.history] == [
        "ANALYZING",
        "DECIDED",
        "EXECUTING",
    ]


@pytest.mark.asyncio
async def test_redelivery_after_terminal_is_ignored(
    workflow,
    sample_request: OptimizationRequest,
    sample_decision,
    optimization_repository,
    execution_dispatcher,
    status_publisher,
) -> None:
    from datetime import datetime, timezone

    from ecopilot.domain.entities.optimization import ExecutionResult

    state = OptimizationState.received(sample_request)
    state.advance_to(OptimizationStatus.ANALYZING)
    state.decide(sample_decision)
    state.advance_to(OptimizationStatus.EXECUTING)
    state.finish(
        ExecutionResult(success=True, applied_at=datetime.now(timezone.utc), details="ok")
    )
    await optimization_repository.create(state)

    result = await workflow.on_optimization_required(sample_request)

    assert result.status is OptimizationStatus.COMPLETED
    assert execution_dispatcher.requests == []
    assert status_publisher.messages == []


@pytest.mark.asyncio
async def test_dispatch_error_propagates_for_redelivery(
    optimization_repository, status_publisher, sample_request: OptimizationRequest
) -> None:
    class _BrokenDispatcher:
        async def dispatch_execution(self, request):
            raise ConnectionError("broker down")

    workflow = OptimizationWorkflowUseCase(
        optimization_repository=optimization_repository,
        decision_engine=DecisionEngine(),
        execution_dispatcher=_BrokenDispatcher(),
        status_publisher=status_publisher,
    )

    with pytest.raises(ConnectionError):
        await workflow.on_optimization_required(sample_request)

    stored = await optimization_repository.get_by_id(sample_request.optimization_id)
    assert stored.status is OptimizationStatus.EXECUTING


@pytest.mark.asyncio
async def test_stored_executing_state_without_decision_is_rejected(
    workflow,
    sample_request: OptimizationRequest,
    optimization_repository,
    execution_dispatcher,
) -> None:
    state = OptimizationState.received(sample_request)
    state.status = OptimizationStatus.EXECUTING
    await optimization_repository.create(state)

    with pytest.raises(InvalidStateTransitionError, match="no decision recorded"):
        await workflow.on_optimization_required(sample_request)

    assert execution_dispatcher.requests == []
