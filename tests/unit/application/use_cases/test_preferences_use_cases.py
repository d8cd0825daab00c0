from __future__ import annotations

import pytest

from ecopilot.application.dtos.preferences_dto import PreferencesRequestDTO
from ecopilot.application.use_cases.preferences_use_cases import (
    GetPreferencesUseCase,
    UpdatePreferencesUseCase,
)
from ecopilot.domain.entities.usage import AutomationLevel, CostSensitivity, Thresholds


@pytest.mark.asyncio
async def test_defaults_returned_when_nothing_stored(preferences_repository) -> None:
    use_case = GetPreferencesUseCase(preferences_repository, Thresholds(80.0, 40.0))

    preferences = await use_case.execute()

    assert preferences.is_default is True
    assert preferences.thresholds.daily_max == 80.0
    assert preferences.thresholds.peak_hour_limit == 40.0
    assert preferences.updated_at is None


@pytest.mark.asyncio
async def test_update_then_get_round_trips(preferences_repository) -> None:
    request = PreferencesRequestDTO.model_validate(
        {
            "thresholds": {"dailyMax": 42.0, "peakHourLimit": 21.0},
            "costSensitivity": "high",
            "automationLevel": "automatic",
        }
    )

    saved = await UpdatePreferencesUseCase(preferences_repository).execute(request)
    loaded = await GetPreferencesUseCase(preferences_repository, Thresholds()).execute()

    assert saved.updated_at is not None
    assert loaded.is_default is False
    assert loaded.thresholds.daily_max == 42.0
    assert loaded.cost_sensitivity is CostSensitivity.HIGH
    assert loaded.automation_level is AutomationLevel.AUTOMATIC
    assert preferences_repository.preferences.thresholds == Thresholds(42.0, 21.0)
