"""Celery task implementations for infrastructure services."""

from .base import CallbackTask, resolve_container
from .execution import execute_optimization
from .optimization import optimize_energy
from .sensor_processing import process_sensor_reading

__all__ = [
    "CallbackTask",
    "execute_optimization",
    "optimize_energy",
    "process_sensor_reading",
    "resolve_container",
]
