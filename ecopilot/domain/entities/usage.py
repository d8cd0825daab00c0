"""
Domain Entities - Usage

Sensor readings, per-day usage aggregates and the user thresholds that
decide when a day's consumption counts as a breach.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

DEFAULT_DAILY_MAX = 100.0
DEFAULT_PEAK_HOUR_LIMIT = 50.0


class SensorType(str, Enum):
    """Kind of physical quantity a sensor reports."""

    ENERGY = "energy"
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"


class CostSensitivity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AutomationLevel(str, Enum):
    MANUAL = "manual"
    SUGGESTED = "suggested"
    AUTOMATIC = "automatic"


@dataclass
class SensorReading:
    """
    A single numeric reading as accepted by ingestion.

    ``reading_id`` is assigned once at ingestion and travels with every
    redelivery of the reading, so aggregation can apply it exactly once.
    """

    sensor_id: str
    value: float
    timestamp: datetime
    unit: str = "kWh"
    type: SensorType = SensorType.ENERGY
    reading_id: str = field(default_factory=lambda: uuid4().hex)

    @property
    def date(self) -> str:
        """Calendar day key (``YYYY-MM-DD``) used for daily aggregation."""
        return self.timestamp.astimezone(timezone.utc).date().isoformat()


@dataclass
class SensorState:
    """Latest known reading of one sensor."""

    sensor_id: str
    latest_reading: SensorReading
    last_updated: datetime


@dataclass
class DailyUsage:
    """
    Consumption aggregate for one calendar day.

    ``total_consumption`` is always the exact sum of ``readings`` and
    ``reading_count`` its length.
    """

    date: str
    total_consumption: float = 0.0
    peak_usage: float = 0.0
    avg_usage: float = 0.0
    reading_count: int = 0
    readings: List[float] = field(default_factory=list)

    def add_reading(self, value: float) -> None:
        """Fold one reading into the aggregate."""
        self.readings.append(value)
        self.recompute()

    def recompute(self) -> None:
        """Derive every aggregate from the stored readings."""
        self.reading_count = len(self.readings)
        self.total_consumption = sum(self.readings)
        self.peak_usage = max(self.readings, default=0.0)
        self.avg_usage = (
            self.total_consumption / self.reading_count if self.reading_count else 0.0
        )


@dataclass
class Thresholds:
    daily_max: float = DEFAULT_DAILY_MAX
    peak_hour_limit: float = DEFAULT_PEAK_HOUR_LIMIT

    def is_exceeded_by(self, total_consumption: float) -> bool:
        """A breach is strictly above the daily maximum."""
        return total_consumption > self.daily_max


@dataclass
class UserPreferences:
    """Household energy preferences, including breach thresholds."""

    thresholds: Thresholds = field(default_factory=Thresholds)
    cost_sensitivity: CostSensitivity = CostSensitivity.MEDIUM
    automation_level: AutomationLevel = AutomationLevel.SUGGESTED
    updated_at: Optional[datetime] = None

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)
