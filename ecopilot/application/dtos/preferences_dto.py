"""
Application DTOs - User Preferences
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ecopilot.application.dtos.sensor_dto import CamelModel
from ecopilot.domain.entities.usage import (
    DEFAULT_DAILY_MAX,
    DEFAULT_PEAK_HOUR_LIMIT,
    AutomationLevel,
    CostSensitivity,
    Thresholds,
    UserPreferences,
)


class ThresholdsDTO(CamelModel):
    daily_max: float = Field(default=DEFAULT_DAILY_MAX, gt=0)
    peak_hour_limit: float = Field(default=DEFAULT_PEAK_HOUR_LIMIT, gt=0)


class PreferencesRequestDTO(CamelModel):
    """Body of ``POST /api/user/preferences``; omitted fields take defaults."""

    thresholds: ThresholdsDTO = Field(default_factory=ThresholdsDTO)
    cost_sensitivity: CostSensitivity = CostSensitivity.MEDIUM
    automation_level: AutomationLevel = AutomationLevel.SUGGESTED

    def to_entity(self) -> UserPreferences:
        return UserPreferences(
            thresholds=Thresholds(
                daily_max=self.thresholds.daily_max,
                peak_hour_limit=self.thresholds.peak_hour_limit,
            ),
            cost_sensitivity=self.cost_sensitivity,
            automation_level=self.automation_level,
        )


class PreferencesDTO(PreferencesRequestDTO):
    is_default: bool = False
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(
        cls, preferences: UserPreferences, is_default: bool = False
    ) -> "PreferencesDTO":
        return cls(
            thresholds=ThresholdsDTO(
                daily_max=preferences.thresholds.daily_max,
                peak_hour_limit=preferences.thresholds.peak_hour_limit,
            ),
            cost_sensitivity=preferences.cost_sensitivity,
            automation_level=preferences.automation_level,
            is_default=is_default,
            updated_at=preferences.updated_at,
        )
