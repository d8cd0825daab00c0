"""Application use cases package."""

from .decision_use_case import (
    AIOutcome,
    DecisionEngine,
    DecisionOutcome,
    FallbackOutcome,
)
from .optimization_execution_use_case import OptimizationExecutionUseCase
from .optimization_query_use_cases import (
    GetDailyUsageUseCase,
    GetOptimizationUseCase,
    UsageNotFoundError,
)
from .optimization_workflow_use_case import OptimizationWorkflowUseCase
from .preferences_use_cases import GetPreferencesUseCase, UpdatePreferencesUseCase
from .sensor_ingestion_use_case import SensorIngestionError, SensorIngestionUseCase
from .usage_aggregation_use_case import AggregationOutcome, UsageAggregationUseCase

__all__ = [
    "AIOutcome",
    "AggregationOutcome",
    "DecisionEngine",
    "DecisionOutcome",
    "FallbackOutcome",
    "GetDailyUsageUseCase",
    "GetOptimizationUseCase",
    "GetPreferencesUseCase",
    "OptimizationExecutionUseCase",
    "OptimizationWorkflowUseCase",
    "SensorIngestionError",
    "SensorIngestionUseCase",
    "UpdatePreferencesUseCase",
    "UsageAggregationUseCase",
    "UsageNotFoundError",
]
