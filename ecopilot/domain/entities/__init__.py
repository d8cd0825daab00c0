"""
Domain Entities Package

This package contains the core domain entities and business logic.
"""

from .errors import (
    ActuationError,
    DecisionBackendError,
    DomainError,
    InvalidStateTransitionError,
    OptimizationNotFoundError,
)
from .optimization import (
    Decision,
    DecisionSource,
    ExecutionRequest,
    ExecutionResult,
    OptimizationAction,
    OptimizationRequest,
    OptimizationState,
    OptimizationStatus,
)
from .usage import (
    AutomationLevel,
    CostSensitivity,
    DailyUsage,
    SensorReading,
    SensorState,
    SensorType,
    Thresholds,
    UserPreferences,
)

__all__ = [
    "ActuationError",
    "AutomationLevel",
    "CostSensitivity",
    "DailyUsage",
    "Decision",
    "DecisionBackendError",
    "DecisionSource",
    "DomainError",
    "ExecutionRequest",
    "ExecutionResult",
    "InvalidStateTransitionError",
    "OptimizationAction",
    "OptimizationNotFoundError",
    "OptimizationRequest",
    "OptimizationState",
    "OptimizationStatus",
    "SensorReading",
    "SensorState",
    "SensorType",
    "Thresholds",
    "UserPreferences",
]
