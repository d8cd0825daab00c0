from __future__ import annotations

import pytest
from fastapi import HTTPException

from ecopilot.application.dtos.preferences_dto import (
    PreferencesDTO,
    PreferencesRequestDTO,
)
from ecopilot.application.use_cases.preferences_use_cases import (
    GetPreferencesUseCase,
    UpdatePreferencesUseCase,
)
from ecopilot.presentation.controllers.preferences_controller import (
    get_preferences,
    update_preferences,
)


class _StubGet(GetPreferencesUseCase):
    def __init__(self) -> None:
        pass

    async def execute(self) -> PreferencesDTO:
        return PreferencesDTO(is_default=True)


class _StubUpdate(UpdatePreferencesUseCase):
    def __init__(self) -> None:
        pass

    async def execute(self, request: PreferencesRequestDTO) -> PreferencesDTO:
        return PreferencesDTO(
            thresholds=request.thresholds,
            cost_sensitivity=request.cost_sensitivity,
            automation_level=request.automation_level,
        )


@pytest.mark.asyncio
async def test_get_preferences_returns_defaults() -> None:
    response = await get_preferences(get_preferences_use_case=_StubGet())

    assert response.is_default is True
    assert response.thresholds.daily_max == 100.0


@pytest.mark.asyncio
async def test_update_preferences_returns_saved() -> None:
    request = PreferencesRequestDTO.model_validate({"thresholds": {"dailyMax": 12.0}})

    response = await update_preferences(
        request=request, update_preferences_use_case=_StubUpdate()
    )

    assert response.thresholds.daily_max == 12.0
    assert response.thresholds.peak_hour_limit == 50.0


@pytest.mark.asyncio
async def test_preferences_errors_become_500() -> None:
    class _Fail(_StubGet):
        async def execute(self) -> PreferencesDTO:
            raise RuntimeError("mongo down")

    with pytest.raises(HTTPException) as exc:
        await get_preferences(get_preferences_use_case=_Fail())
    assert exc.value.status_code == 500
