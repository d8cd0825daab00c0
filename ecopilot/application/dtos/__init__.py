"""Application DTOs package."""

from .decision_dto import AIDecisionPayload, decode_ai_decision
from .optimization_dto import (
    DecisionDTO,
    EnergyStatusDTO,
    ExecutionRequestedEventDTO,
    ExecutionResultDTO,
    OptimizationRequiredEventDTO,
    OptimizationStateDTO,
)
from .preferences_dto import PreferencesDTO, PreferencesRequestDTO, ThresholdsDTO
from .sensor_dto import (
    DailyUsageDTO,
    SensorIngestRequestDTO,
    SensorIngestResponseDTO,
    SensorReadingEventDTO,
)

__all__ = [
    "AIDecisionPayload",
    "DailyUsageDTO",
    "DecisionDTO",
    "EnergyStatusDTO",
    "ExecutionRequestedEventDTO",
    "ExecutionResultDTO",
    "OptimizationRequiredEventDTO",
    "OptimizationStateDTO",
    "PreferencesDTO",
    "PreferencesRequestDTO",
    "SensorIngestRequestDTO",
    "SensorIngestResponseDTO",
    "SensorReadingEventDTO",
    "ThresholdsDTO",
    "decode_ai_decision",
]
