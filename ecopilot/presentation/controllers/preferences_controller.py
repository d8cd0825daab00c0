"""
Preferences Router - Presentation Layer
"""

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, status

from ecopilot.application.dtos.preferences_dto import (
    PreferencesDTO,
    PreferencesRequestDTO,
)
from ecopilot.application.use_cases.preferences_use_cases import (
    GetPreferencesUseCase,
    UpdatePreferencesUseCase,
)
from ecopilot.shared import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/user", tags=["Preferences"])


@router.get(
    "/preferences", response_model=PreferencesDTO, response_model_by_alias=True
)
@inject
async def get_preferences(
    get_preferences_use_case: GetPreferencesUseCase = Depends(
        Provide["get_preferences_use_case"]
    ),
) -> PreferencesDTO:
    """Return stored preferences, or the defaults if none were saved."""
    try:
        return await get_preferences_use_case.execute()
    except Exception as e:
        logger.error("Failed to get preferences", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )


@router.post(
    "/preferences", response_model=PreferencesDTO, response_model_by_alias=True
)
@inject
async def update_preferences(
    request: PreferencesRequestDTO,
    update_preferences_use_case: UpdatePreferencesUseCase = Depends(
        Provide["update_preferences_use_case"]
    ),
) -> PreferencesDTO:
    """
    Replace the preferences.

    New thresholds apply to the next reading aggregated; a day whose
    optimization already fired is not re-evaluated.
    """
    try:
        return await update_preferences_use_case.execute(request)
    except Exception as e:
        logger.error("Failed to update preferences", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )
