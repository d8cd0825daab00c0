"""Celery task consuming ``sensor.reading.created``."""

import asyncio
from typing import Any, Dict

from pydantic import ValidationError

from ecopilot.application.dtos.sensor_dto import SensorReadingEventDTO
from ecopilot.infrastructure.services.celery_config import celery_app, retry_delay
from ecopilot.infrastructure.services.tasks.base import (
    CallbackTask,
    logger,
    resolve_container,
)
from ecopilot.shared import bound_log_context
from ecopilot.shared.consts import TaskNames


@celery_app.task(
    bind=True, base=CallbackTask, name=TaskNames.PROCESS_SENSOR_READING.value
)
def process_sensor_reading(self, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Fold one reading into its day's usage."""

    try:
        event = SensorReadingEventDTO.model_validate(payload)
    except ValidationError as exc:
        # a malformed event never becomes valid on redelivery
        logger.error("celery.sensor_reading.rejected", error=str(exc))
        return {"status": "rejected", "error": str(exc)}

    with bound_log_context(sensor_id=event.sensor_id, date=event.date):
        try:
            use_case = resolve_container().usage_aggregation_use_case()
            outcome = asyncio.run(
                use_case.process_reading(
                    event.sensor_id,
                    event.value,
                    event.date,
                    event.timestamp,
                    event.reading_id,
                )
            )
        except Exception as exc:
            logger.error(
                "celery.sensor_reading.failed", error=str(exc), exc_info=exc
            )
            if self.request.retries < self.max_retries:
                raise self.retry(countdown=retry_delay(self.request.retries), exc=exc)
            raise

    return {
        "status": "processed",
        "date": event.date,
        "total_consumption": outcome.usage.total_consumption,
        "threshold_exceeded": outcome.exceeded,
        "optimization_id": outcome.request.optimization_id if outcome.emitted else None,
    }
