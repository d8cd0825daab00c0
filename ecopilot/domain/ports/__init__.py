"""Domain ports implemented by the infrastructure layer."""

from .actuator import IActuator
from .decision_backend import IDecisionBackend
from .event_publishers import (
    IExecutionDispatcher,
    IOptimizationEventPublisher,
    ISensorEventPublisher,
)
from .status_publisher import IStatusPublisher

__all__ = [
    "IActuator",
    "IDecisionBackend",
    "IExecutionDispatcher",
    "IOptimizationEventPublisher",
    "ISensorEventPublisher",
    "IStatusPublisher",
]
