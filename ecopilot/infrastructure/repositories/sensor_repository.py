"""
Infrastructure Repository - Sensors MongoDB Implementation

Keeps the latest reading per sensor plus an append-only raw reading log.
"""

from typing import Any, Dict, Optional

from ecopilot.domain.entities.usage import SensorReading, SensorState, SensorType
from ecopilot.domain.repositories.sensor_repository import ISensorRepository
from ecopilot.infrastructure.database.mongo_database import (
    RAW_READINGS,
    SENSORS,
    MongoDatabase,
)


def _reading_document(reading: SensorReading) -> Dict[str, Any]:
    return {
        "reading_id": reading.reading_id,
        "sensor_id": reading.sensor_id,
        "value": reading.value,
        "unit": reading.unit,
        "type": reading.type.value,
        "timestamp": reading.timestamp,
        "date": reading.date,
    }


def _reading_from_document(document: Dict[str, Any]) -> SensorReading:
    return SensorReading(
        sensor_id=document["sensor_id"],
        value=float(document["value"]),
        timestamp=document["timestamp"],
        unit=document.get("unit", "kWh"),
        type=SensorType(document.get("type", SensorType.ENERGY.value)),
        reading_id=document["reading_id"],
    )


class SensorRepository(ISensorRepository):
    def __init__(self, database: MongoDatabase):
        self.database = database

    async def save_state(self, state: SensorState) -> None:
        self.database.get_collection(SENSORS).replace_one(
            {"sensor_id": state.sensor_id},
            {
                "sensor_id": state.sensor_id,
                "latest_reading": _reading_document(state.latest_reading),
                "last_updated": state.last_updated,
            },
            upsert=True,
        )

    async def get_state(self, sensor_id: str) -> Optional[SensorState]:
        document = await self.database.find_one(SENSORS, {"sensor_id": sensor_id})
        if not document:
            return None
        return SensorState(
            sensor_id=document["sensor_id"],
            latest_reading=_reading_from_document(document["latest_reading"]),
            last_updated=document["last_updated"],
        )

    async def record_raw(self, reading: SensorReading) -> None:
        self.database.get_collection(RAW_READINGS).insert_one(
            _reading_document(reading)
        )
