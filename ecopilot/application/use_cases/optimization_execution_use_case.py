"""
Application Use Cases - Optimization Execution

Applies a decided action and performs the optimization's terminal write.
Invoked by the queue with at-least-once delivery, so a redelivery for an
optimization that is already COMPLETED or FAILED is a no-op.
"""

import asyncio
from datetime import datetime, timezone
from typing import Optional

import structlog

from ecopilot.domain.entities.errors import ActuationError
from ecopilot.domain.entities.optimization import (
    Decision,
    ExecutionResult,
    OptimizationState,
)
from ecopilot.domain.ports.actuator import IActuator
from ecopilot.domain.ports.status_publisher import IStatusPublisher
from ecopilot.domain.repositories.optimization_repository import IOptimizationRepository

logger = structlog.get_logger(__name__)


class OptimizationExecutionUseCase:
    """Executor, the lifecycle's delegate for the terminal write."""

    def __init__(
        self,
        optimization_repository: IOptimizationRepository,
        actuator: IActuator,
        status_publisher: IStatusPublisher,
        timeout_seconds: Optional[float] = None,
    ):
        self.optimization_repository = optimization_repository
        self.actuator = actuator
        self.status_publisher = status_publisher
        self.timeout_seconds = timeout_seconds

    async def execute(
        self,
        optimization_id: str,
        decision: Decision,
        triggered_at: datetime,
        *,
        final_attempt: bool = True,
    ) -> Optional[ExecutionResult]:
        """
        Apply ``decision`` and record the outcome.

        Args:
            optimization_id: Optimization the decision belongs to.
            decision: Decision to apply.
            triggered_at: When the optimization was triggered.
            final_attempt: When False, a failure is logged and re-raised
                without the FAILED write so the queue can retry.

        Returns:
            The recorded execution result. When the optimization was already
            terminal, or became terminal while this attempt was running, that
            is the stored result rather than this attempt's.

        Raises:
            Exception: Whatever the actuator raised, after recording it.
                Exceeding ``timeout_seconds`` raises :class:`ActuationError`.
        """
        state = await self.optimization_repository.get_by_id(optimization_id)
        if state is not None and state.is_terminal:
            logger.info(
                "execution.skipped_terminal",
                optimization_id=optimization_id,
                status=state.status.value,
            )
            return state.execution_result

        logger.info(
            "execution.started",
            optimization_id=optimization_id,
            action=decision.action.value,
            target_window=decision.target_window,
            triggered_at=triggered_at.isoformat(),
        )

        try:
            result = await self._apply(decision)
        except Exception as exc:
            logger.error(
                "execution.failed",
                optimization_id=optimization_id,
                error=str(exc),
                final_attempt=final_attempt,
            )
            if state is not None and final_attempt:
                await self._finish(state, self._failure(str(exc)))
            raise

        if state is None:
            logger.warning(
                "execution.state_missing",
                optimization_id=optimization_id,
                success=result.success,
            )
            return result

        recorded = await self._finish(state, result)
        logger.info(
            "execution.completed",
            optimization_id=optimization_id,
            success=recorded.success if recorded else result.success,
            applied_at=result.applied_at.isoformat(),
            duration_seconds=state.get_duration(),
        )
        return recorded

    async def fail(self, optimization_id: str, error: str) -> Optional[ExecutionResult]:
        """
        Write FAILED for an optimization whose execution was cut short.

        Used when the attempt was interrupted outside :meth:`execute`, such
        as by the worker's time limit. A terminal optimization is left as is.
        """
        state = await self.optimization_repository.get_by_id(optimization_id)
        if state is None:
            logger.warning("execution.state_missing", optimization_id=optimization_id)
            return None
        if state.is_terminal:
            return state.execution_result

        logger.error("execution.failed", optimization_id=optimization_id, error=error)
        return await self._finish(state, self._failure(error))

    async def _apply(self, decision: Decision) -> ExecutionResult:
        if self.timeout_seconds is None:
            return await self.actuator.apply(decision)
        try:
            return await asyncio.wait_for(
                self.actuator.apply(decision), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError as exc:
            raise ActuationError(
                f"Actuation exceeded {self.timeout_seconds}s"
            ) from exc

    async def _finish(
        self, state: OptimizationState, result: ExecutionResult
    ) -> Optional[ExecutionResult]:
        state.finish(result)
        written = await self.optimization_repository.complete(state)
        if not written:
            stored = await self.optimization_repository.get_by_id(state.id)
            logger.info(
                "execution.terminal_write_skipped",
                optimization_id=state.id,
                status=stored.status.value if stored else None,
            )
            return stored.execution_result if stored else None
        logger.info(
            "execution.state_transition",
            optimization_id=state.id,
            status=state.status.value,
        )
        await self.status_publisher.publish(state)
        return result

    @staticmethod
    def _failure(error: str) -> ExecutionResult:
        return ExecutionResult(
            success=False,
            applied_at=datetime.now(timezone.utc),
            details=f"Execution failed: {error}",
        )
