"""Celery-backed implementations of the pipeline's publishing ports."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

from celery import Celery

from ecopilot.application.dtos.optimization_dto import (
    ExecutionRequestedEventDTO,
    OptimizationRequiredEventDTO,
)
from ecopilot.application.dtos.sensor_dto import SensorReadingEventDTO
from ecopilot.domain.entities.optimization import ExecutionRequest, OptimizationRequest
from ecopilot.domain.entities.usage import SensorReading
from ecopilot.shared import get_logger
from ecopilot.shared.consts import TASK_QUEUES, TaskNames, Topics

logger = get_logger(__name__)


class _CeleryPublisher:
    def __init__(self, celery_app: Optional[Celery] = None) -> None:
        self._celery_app = celery_app

    @property
    def celery_app(self) -> Celery:
        if self._celery_app is None:
            from ecopilot.infrastructure.services.celery_config import celery_app

            self._celery_app = celery_app
        return self._celery_app

    async def _send(self, task: TaskNames, topic: Topics, payload: Dict[str, Any]) -> str:
        queue = TASK_QUEUES[task].value

        def _send_task() -> str:
            result = self.celery_app.send_task(
                task.value, kwargs={"payload": payload}, queue=queue
            )
            return result.id

        task_id: Optional[str] = await asyncio.to_thread(_send_task)
        logger.info("events.published", topic=topic.value, queue=queue, task_id=task_id)
        return task_id or ""


class CelerySensorEventPublisher(_CeleryPublisher):
    """Publishes ``sensor.reading.created``."""

    async def publish_reading_created(self, reading: SensorReading) -> str:
        payload = SensorReadingEventDTO.from_entity(reading).model_dump(
            mode="json", by_alias=True
        )
        return await self._send(
            TaskNames.PROCESS_SENSOR_READING, Topics.SENSOR_READING_CREATED, payload
        )


class CeleryOptimizationEventPublisher(_CeleryPublisher):
    """Publishes ``optimization.required``."""

    async def publish_optimization_required(self, request: OptimizationRequest) -> str:
        payload = OptimizationRequiredEventDTO.from_entity(request).model_dump(
            mode="json", by_alias=True
        )
        return await self._send(
            TaskNames.OPTIMIZE_ENERGY, Topics.OPTIMIZATION_REQUIRED, payload
        )


class CeleryExecutionDispatcher(_CeleryPublisher):
    """Hands ``execution.requested`` to the executor queue."""

    async def dispatch_execution(self, request: ExecutionRequest) -> str:
        payload = ExecutionRequestedEventDTO.from_entity(request).model_dump(
            mode="json", by_alias=True
        )
        return await self._send(
            TaskNames.EXECUTE_OPTIMIZATION, Topics.EXECUTION_REQUESTED, payload
        )
