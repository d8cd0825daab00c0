"""
Application Use Cases - User Preferences
"""

import structlog

from ecopilot.application.dtos.preferences_dto import (
    PreferencesDTO,
    PreferencesRequestDTO,
)
from ecopilot.domain.entities.usage import Thresholds, UserPreferences
from ecopilot.domain.repositories.preferences_repository import IPreferencesRepository

logger = structlog.get_logger(__name__)


class GetPreferencesUseCase:
    def __init__(
        self,
        preferences_repository: IPreferencesRepository,
        default_thresholds: Thresholds,
    ):
        self.preferences_repository = preferences_repository
        self.default_thresholds = default_thresholds

    async def execute(self) -> PreferencesDTO:
        preferences = await self.preferences_repository.get()
        if preferences is None:
            defaults = UserPreferences(thresholds=self.default_thresholds)
            return PreferencesDTO.from_entity(defaults, is_default=True)
        return PreferencesDTO.from_entity(preferences)


class UpdatePreferencesUseCase:
    def __init__(self, preferences_repository: IPreferencesRepository):
        self.preferences_repository = preferences_repository

    async def execute(self, request: PreferencesRequestDTO) -> PreferencesDTO:
        preferences = request.to_entity()
        preferences.touch()
        saved = await self.preferences_repository.save(preferences)
        logger.info(
            "preferences.updated",
            daily_max=saved.thresholds.daily_max,
            peak_hour_limit=saved.thresholds.peak_hour_limit,
            cost_sensitivity=saved.cost_sensitivity.value,
            automation_level=saved.automation_level.value,
        )
        return PreferencesDTO.from_entity(saved)
