"""
Repositories package - Infrastructure Layer

MongoDB implementations of the domain repository interfaces.
"""

from ecopilot.infrastructure.repositories.optimization_repository import (
    OptimizationRepository,
)
from ecopilot.infrastructure.repositories.preferences_repository import (
    PreferencesRepository,
)
from ecopilot.infrastructure.repositories.sensor_repository import SensorRepository
from ecopilot.infrastructure.repositories.usage_repository import UsageRepository

__all__ = [
    "OptimizationRepository",
    "PreferencesRepository",
    "SensorRepository",
    "UsageRepository",
]
