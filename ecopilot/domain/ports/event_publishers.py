"""Domain ports for publishing pipeline events to the queue."""

from __future__ import annotations

from typing import Protocol

from ecopilot.domain.entities.optimization import (
    ExecutionRequest,
    OptimizationRequest,
)
from ecopilot.domain.entities.usage import SensorReading


class ISensorEventPublisher(Protocol):
    """Publishes ``sensor.reading.created`` events."""

    async def publish_reading_created(self, reading: SensorReading) -> str:
        """Queue a reading for aggregation; returns the dispatched task id."""
        ...


class IOptimizationEventPublisher(Protocol):
    """Publishes ``optimization.required`` events."""

    async def publish_optimization_required(self, request: OptimizationRequest) -> str:
        ...


class IExecutionDispatcher(Protocol):
    """Hands execution requests to the background executor."""

    async def dispatch_execution(self, request: ExecutionRequest) -> str:
        ...
