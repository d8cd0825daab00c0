from __future__ import annotations

from datetime import datetime, timezone

import pytest

from ecopilot.domain.entities.errors import (
    InvalidStateTransitionError,
    OptimizationNotFoundError,
)
from ecopilot.domain.entities.optimization import (
    DecisionSource,
    ExecutionResult,
    OptimizationState,
    OptimizationStatus,
)
from ecopilot.infrastructure.repositories.optimization_repository import (
    OptimizationRepository,
)


@pytest.mark.asyncio
async def test_create_is_unique_per_id(fake_mongo_database, sample_request) -> None:
    repository = OptimizationRepository(fake_mongo_database)
    state = OptimizationState.received(sample_request)

    assert await repository.create(state) is True
    assert await repository.create(state) is False

    stored = await repository.get_by_id(state.id)
    assert stored.status is OptimizationStatus.RECEIVED
    assert stored.triggered_at == sample_request.triggered_at


@pytest.mark.asyncio
async def test_save_round_trips_decision(
    fake_mongo_database, sample_request, sample_decision
) -> None:
    repository = OptimizationRepository(fake_mongo_database)
    state = OptimizationState.received(sample_request)
    await repository.create(state)

    state.advance_to(OptimizationStatus.ANALYZING)
    state.decide(sample_decision)
    await repository.save(state)

    stored = await repository.get_by_id(state.id)
    assert stored.status is OptimizationStatus.DECIDED
    assert stored.decision == sample_decision
    assert stored.decision.source is DecisionSource.FALLBACK


@pytest.mark.asyncio
async def test_save_unknown_state_raises(fake_mongo_database, sample_request) -> None:
    repository = OptimizationRepository(fake_mongo_database)

    with pytest.raises(OptimizationNotFoundError):
        await repository.save(OptimizationState.received(sample_request))


@pytest.mark.asyncio
async def test_terminal_state_is_never_overwritten(
    fake_mongo_database, sample_request, sample_decision
) -> None:
    repository = OptimizationRepository(fake_mongo_database)
    state = OptimizationState.received(sample_request)
    state.advance_to(OptimizationStatus.ANALYZING)
    state.decide(sample_decision)
    state.advance_to(OptimizationStatus.EXECUTING)
    await repository.create(state)

    done = await repository.get_by_id(state.id)
    done.finish(
        ExecutionResult(success=True, applied_at=datetime.now(timezone.utc), details="ok")
    )
    assert await repository.complete(done) is True

    late = await repository.get_by_id(state.id)
    late.status = OptimizationStatus.EXECUTING
    late.finish(
        ExecutionResult(
            success=False, applied_at=datetime.now(timezone.utc), details="late"
        )
    )
    assert await repository.complete(late) is False

    with pytest.raises(InvalidStateTransitionError):
        await repository.save(late)

    stored = await repository.get_by_id(state.id)
    assert stored.status is OptimizationStatus.COMPLETED
    assert stored.execution_result.details == "ok"
