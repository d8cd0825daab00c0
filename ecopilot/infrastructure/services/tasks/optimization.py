"""Celery task consuming ``optimization.required``."""

import asyncio
from typing import Any, Dict

from pydantic import ValidationError

from ecopilot.application.dtos.optimization_dto import OptimizationRequiredEventDTO
from ecopilot.infrastructure.services.celery_config import celery_app, retry_delay
from ecopilot.infrastructure.services.tasks.base import (
    CallbackTask,
    logger,
    resolve_container,
)
from ecopilot.shared import bound_log_context
from ecopilot.shared.consts import TaskNames


@celery_app.task(bind=True, base=CallbackTask, name=TaskNames.OPTIMIZE_ENERGY.value)
def optimize_energy(self, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Run the optimization lifecycle up to execution dispatch."""

    try:
        event = OptimizationRequiredEventDTO.model_validate(payload)
    except ValidationError as exc:
        logger.error("celery.optimization.rejected", error=str(exc))
        return {"status": "rejected", "error": str(exc)}

    with bound_log_context(optimization_id=event.optimization_id):
        try:
            workflow = resolve_container().optimization_workflow_use_case()
            state = asyncio.run(workflow.on_optimization_required(event.to_entity()))
        except Exception as exc:
            logger.error("celery.optimization.failed", error=str(exc), exc_info=exc)
            if self.request.retries < self.max_retries:
                raise self.retry(countdown=retry_delay(self.request.retries), exc=exc)
            raise

    return {
        "optimization_id": state.id,
        "status": state.status.value,
        "action": state.decision.action.value if state.decision else None,
    }
