"""
Simulated actuation of optimization decisions.

No device integration exists yet; applying a decision records what would be
scheduled and reports success.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from ecopilot.domain.entities.errors import ActuationError
from ecopilot.domain.entities.optimization import Decision, ExecutionResult
from ecopilot.shared import get_logger

logger = get_logger(__name__)


class SimulatedActuator:
    def __init__(self, delay_seconds: float = 0.0) -> None:
        self._delay_seconds = delay_seconds

    async def apply(self, decision: Decision) -> ExecutionResult:
        if not decision.target_window:
            raise ActuationError("Decision has no target window")
        if self._delay_seconds:
            await asyncio.sleep(self._delay_seconds)

        details = (
            f"Applied {decision.action.value} optimization for window "
            f"{decision.target_window}, expected savings: "
            f"{decision.expected_savings_percent}%"
        )
        logger.info(
            "actuator.applied",
            action=decision.action.value,
            target_window=decision.target_window,
        )
        return ExecutionResult(
            success=True, applied_at=datetime.now(timezone.utc), details=details
        )
