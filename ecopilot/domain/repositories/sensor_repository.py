"""
Domain Repository Interface - Sensors
"""

from abc import ABC, abstractmethod
from typing import Optional

from ecopilot.domain.entities.usage import SensorReading, SensorState


class ISensorRepository(ABC):
    @abstractmethod
    async def save_state(self, state: SensorState) -> None:
        """Upsert the latest state of a sensor."""
        pass

    @abstractmethod
    async def get_state(self, sensor_id: str) -> Optional[SensorState]:
        pass

    @abstractmethod
    async def record_raw(self, reading: SensorReading) -> None:
        """Append a raw reading to the reading log."""
        pass
