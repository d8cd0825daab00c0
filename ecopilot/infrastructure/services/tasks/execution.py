"""
Celery task consuming ``execution.requested``.

Every failed attempt is re-raised. Only the last permitted attempt writes
FAILED; earlier ones leave the optimization EXECUTING for the retry.
Actuation is bounded inside the executor below the task's soft time limit,
so the limit only fires when the terminal write itself stalls.
"""

import asyncio
from typing import Any, Dict

from celery.exceptions import SoftTimeLimitExceeded
from pydantic import ValidationError

from ecopilot.application.dtos.optimization_dto import ExecutionRequestedEventDTO
from ecopilot.infrastructure.services.celery_config import celery_app, retry_delay
from ecopilot.infrastructure.services.tasks.base import (
    CallbackTask,
    logger,
    resolve_container,
)
from ecopilot.main.config import get_settings
from ecopilot.shared import bound_log_context
from ecopilot.shared.consts import TaskNames

_celery_settings = get_settings().celery

SOFT_LIMIT_HEADROOM_SECONDS = 5


@celery_app.task(
    bind=True,
    base=CallbackTask,
    name=TaskNames.EXECUTE_OPTIMIZATION.value,
    max_retries=_celery_settings.max_retries,
    soft_time_limit=_celery_settings.execution_timeout_seconds
    + SOFT_LIMIT_HEADROOM_SECONDS,
    time_limit=_celery_settings.execution_timeout_seconds
    + 3 * SOFT_LIMIT_HEADROOM_SECONDS,
)
def execute_optimization(self, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Apply a decided optimization and perform its terminal write."""

    try:
        event = ExecutionRequestedEventDTO.model_validate(payload)
    except ValidationError as exc:
        logger.error("celery.execution.rejected", error=str(exc))
        return {"status": "rejected", "error": str(exc)}

    request = event.to_entity()
    final_attempt = self.request.retries >= self.max_retries

    with bound_log_context(optimization_id=request.optimization_id):
        try:
            executor = resolve_container().optimization_execution_use_case()
            result = asyncio.run(
                executor.execute(
                    request.optimization_id,
                    request.decision,
                    request.triggered_at,
                    final_attempt=final_attempt,
                )
            )
        except SoftTimeLimitExceeded as exc:
            # raised by the worker's signal handler, outside the executor
            logger.error(
                "celery.execution.time_limit_exceeded",
                attempts=self.request.retries + 1,
                final_attempt=final_attempt,
            )
            if not final_attempt:
                raise self.retry(countdown=retry_delay(self.request.retries), exc=exc)
            executor = resolve_container().optimization_execution_use_case()
            asyncio.run(
                executor.fail(
                    request.optimization_id, "Execution exceeded the time limit"
                )
            )
            raise
        except Exception as exc:
            if final_attempt:
                logger.error(
                    "celery.execution.retries_exhausted",
                    attempts=self.request.retries + 1,
                    error=str(exc),
                )
                raise
            raise self.retry(countdown=retry_delay(self.request.retries), exc=exc)

    return {
        "optimization_id": request.optimization_id,
        "success": result.success if result else None,
        "details": result.details if result else None,
    }
