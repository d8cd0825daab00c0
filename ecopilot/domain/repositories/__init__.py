"""Domain repository interfaces."""

from .optimization_repository import IOptimizationRepository
from .preferences_repository import IPreferencesRepository
from .sensor_repository import ISensorRepository
from .usage_repository import IUsageRepository

__all__ = [
    "IOptimizationRepository",
    "IPreferencesRepository",
    "ISensorRepository",
    "IUsageRepository",
]
