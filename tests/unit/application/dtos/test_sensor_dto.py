from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from ecopilot.application.dtos.sensor_dto import (
    DailyUsageDTO,
    SensorIngestRequestDTO,
    SensorIngestResponseDTO,
    SensorReadingEventDTO,
    describe_ingest_error,
)
from ecopilot.domain.entities.usage import DailyUsage, SensorReading, SensorType


def test_ingest_request_defaults() -> None:
    request = SensorIngestRequestDTO.model_validate({"sensorId": "meter-1", "value": 3})

    assert request.sensor_id == "meter-1"
    assert request.value == 3.0
    assert request.unit == "kWh"
    assert request.type is SensorType.ENERGY


def test_zero_value_is_accepted() -> None:
    request = SensorIngestRequestDTO.model_validate({"sensorId": "meter-1", "value": 0})

    assert request.value == 0.0


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ({"value": 3}, "sensorId is required"),
        ({"sensorId": "", "value": 3}, "sensorId is required"),
        ({"sensorId": "meter-1"}, "value must be a non-negative number"),
        ({"sensorId": "meter-1", "value": -1}, "value must be a non-negative number"),
        ({"sensorId": "meter-1", "value": "12"}, "value must be a non-negative number"),
        ({"sensorId": "meter-1", "value": True}, "value must be a non-negative number"),
        ({"value": -1}, "sensorId is required"),
    ],
)
def test_invalid_bodies_are_described(body: dict, message: str) -> None:
    with pytest.raises(ValidationError) as exc:
        SensorIngestRequestDTO.model_validate(body)

    assert describe_ingest_error(exc.value) == message


def test_response_serializes_camel_case() -> None:
    response = SensorIngestResponseDTO(
        sensor_id="meter-1",
        timestamp=datetime(2025, 1, 15, tzinfo=timezone.utc),
        event_emitted="sensor.reading.created",
    )

    body = response.model_dump(mode="json", by_alias=True)

    assert body["success"] is True
    assert body["message"] == "Sensor reading ingested successfully"
    assert body["sensorId"] == "meter-1"
    assert body["eventEmitted"] == "sensor.reading.created"
    assert body["timestamp"].startswith("2025-01-15T00:00:00")


def test_reading_event_carries_the_day() -> None:
    reading = SensorReading(
        sensor_id="meter-1",
        value=2.5,
        timestamp=datetime(2025, 1, 15, 8, tzinfo=timezone.utc),
    )

    event = SensorReadingEventDTO.from_entity(reading)
    restored = SensorReadingEventDTO.model_validate(
        event.model_dump(mode="json", by_alias=True)
    )

    assert restored.date == "2025-01-15"
    assert restored.reading_id == reading.reading_id
    assert restored.value == 2.5
    assert restored.timestamp == reading.timestamp


def test_daily_usage_dto_from_entity() -> None:
    usage = DailyUsage(date="2025-01-15")
    usage.add_reading(20.0)
    usage.add_reading(30.0)

    dto = DailyUsageDTO.from_entity(usage, optimization_triggered=False)

    assert dto.total_consumption == 50.0
    assert dto.reading_count == 2
    assert dto.model_dump(by_alias=True)["totalConsumption"] == 50.0
