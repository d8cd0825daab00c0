"""
Application Use Cases - Sensor Ingestion

Persists an accepted reading and hands it to the aggregation pipeline.
"""

from datetime import datetime, timezone

import structlog

from ecopilot.application.dtos.sensor_dto import (
    SensorIngestRequestDTO,
    SensorIngestResponseDTO,
)
from ecopilot.domain.entities.errors import DomainError
from ecopilot.domain.entities.usage import SensorReading, SensorState
from ecopilot.domain.ports.event_publishers import ISensorEventPublisher
from ecopilot.domain.repositories.sensor_repository import ISensorRepository
from ecopilot.shared.consts import Topics

logger = structlog.get_logger(__name__)


class SensorIngestionError(DomainError):
    """Raised when an accepted reading cannot be stored or published."""

    pass


class SensorIngestionUseCase:
    def __init__(
        self,
        sensor_repository: ISensorRepository,
        event_publisher: ISensorEventPublisher,
    ):
        self.sensor_repository = sensor_repository
        self.event_publisher = event_publisher

    async def execute(self, request: SensorIngestRequestDTO) -> SensorIngestResponseDTO:
        """
        Store the reading, update the sensor state and publish the event.

        Raises:
            SensorIngestionError: If storage or publishing fails.
        """
        timestamp = datetime.now(timezone.utc)
        reading = SensorReading(
            sensor_id=request.sensor_id,
            value=request.value,
            timestamp=timestamp,
            unit=request.unit,
            type=request.type,
        )

        try:
            await self.sensor_repository.save_state(
                SensorState(
                    sensor_id=reading.sensor_id,
                    latest_reading=reading,
                    last_updated=timestamp,
                )
            )
            await self.sensor_repository.record_raw(reading)
            task_id = await self.event_publisher.publish_reading_created(reading)
        except Exception as e:
            logger.error(
                "ingestion.failed", sensor_id=reading.sensor_id, error=str(e)
            )
            raise SensorIngestionError(
                f"Failed to ingest reading: {str(e)}", {"sensor_id": reading.sensor_id}
            ) from e

        logger.info(
            "ingestion.reading_accepted",
            sensor_id=reading.sensor_id,
            value=reading.value,
            date=reading.date,
            task_id=task_id,
        )
        return SensorIngestResponseDTO(
            sensor_id=reading.sensor_id,
            timestamp=timestamp,
            event_emitted=Topics.SENSOR_READING_CREATED.value,
        )
