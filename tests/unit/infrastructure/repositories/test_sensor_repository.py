from __future__ import annotations

from datetime import datetime, timezone

import pytest

from ecopilot.domain.entities.usage import SensorReading, SensorState, SensorType
from ecopilot.infrastructure.repositories.sensor_repository import SensorRepository


def _reading(value: float) -> SensorReading:
    return SensorReading(
        sensor_id="meter-1",
        value=value,
        timestamp=datetime(2025, 1, 15, 8, 30, tzinfo=timezone.utc),
        type=SensorType.ENERGY,
    )


@pytest.mark.asyncio
async def test_latest_state_is_replaced(fake_mongo_database) -> None:
    repository = SensorRepository(fake_mongo_database)
    first, second = _reading(1.5), _reading(2.5)

    await repository.save_state(SensorState("meter-1", first, first.timestamp))
    await repository.save_state(SensorState("meter-1", second, second.timestamp))

    state = await repository.get_state("meter-1")
    assert state.latest_reading == second
    assert await repository.get_state("meter-2") is None


@pytest.mark.asyncio
async def test_raw_readings_are_appended(fake_mongo_database) -> None:
    repository = SensorRepository(fake_mongo_database)

    await repository.record_raw(_reading(1.0))
    await repository.record_raw(_reading(1.0))

    documents = fake_mongo_database.get_collection("raw_readings").documents
    assert len(documents) == 2
    assert documents[0]["date"] == "2025-01-15"
    assert documents[0]["type"] == "energy"
