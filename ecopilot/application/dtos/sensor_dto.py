"""
Application DTOs - Sensors and Usage

Request/response contracts of the ingestion endpoint and the payload of the
``sensor.reading.created`` event.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from ecopilot.domain.entities.usage import DailyUsage, SensorReading, SensorType


class CamelModel(BaseModel):
    """Base for wire contracts: camelCase on the wire, snake_case in code."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SensorIngestRequestDTO(CamelModel):
    """Body of ``POST /api/sensor/ingest``."""

    sensor_id: str = Field(min_length=1, description="Identifier of the sensor")
    value: float = Field(ge=0, description="Reading value, non-negative")
    unit: str = Field(default="kWh")
    type: SensorType = Field(default=SensorType.ENERGY)

    @field_validator("value", mode="before")
    @classmethod
    def _reject_non_numbers(cls, value: object) -> object:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("value must be a non-negative number")
        return value


class SensorIngestResponseDTO(CamelModel):
    success: bool = True
    message: str = "Sensor reading ingested successfully"
    sensor_id: str
    timestamp: datetime
    event_emitted: str


class SensorReadingEventDTO(CamelModel):
    """Payload of ``sensor.reading.created``."""

    reading_id: str = Field(min_length=1)
    sensor_id: str
    value: float = Field(ge=0)
    unit: str
    type: SensorType
    timestamp: datetime
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")

    @classmethod
    def from_entity(cls, reading: SensorReading) -> "SensorReadingEventDTO":
        return cls(
            reading_id=reading.reading_id,
            sensor_id=reading.sensor_id,
            value=reading.value,
            unit=reading.unit,
            type=reading.type,
            timestamp=reading.timestamp,
            date=reading.date,
        )


class DailyUsageDTO(CamelModel):
    date: str
    total_consumption: float
    peak_usage: float
    avg_usage: float
    reading_count: int
    readings: List[float]
    optimization_triggered: Optional[bool] = None

    @classmethod
    def from_entity(
        cls, usage: DailyUsage, optimization_triggered: Optional[bool] = None
    ) -> "DailyUsageDTO":
        return cls(
            date=usage.date,
            total_consumption=usage.total_consumption,
            peak_usage=usage.peak_usage,
            avg_usage=usage.avg_usage,
            reading_count=usage.reading_count,
            readings=list(usage.readings),
            optimization_triggered=optimization_triggered,
        )


_FIELD_MESSAGES = {
    "sensorId": "sensorId is required",
    "sensor_id": "sensorId is required",
    "value": "value must be a non-negative number",
}


def describe_ingest_error(exc: ValidationError) -> str:
    """Single client-facing message for a rejected ingestion body."""
    fields = [str(error["loc"][0]) for error in exc.errors() if error["loc"]]
    for field_name in ("sensorId", "sensor_id", "value"):
        if field_name in fields:
            return _FIELD_MESSAGES[field_name]
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "body"
    return f"{location}: {first['msg']}"
