"""
Usage Router - Presentation Layer
"""

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Path, status

from ecopilot.application.dtos.sensor_dto import DailyUsageDTO
from ecopilot.application.use_cases.optimization_query_use_cases import (
    GetDailyUsageUseCase,
    UsageNotFoundError,
)
from ecopilot.shared import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/usage", tags=["Usage"])


@router.get(
    "/daily/{date}", response_model=DailyUsageDTO, response_model_by_alias=True
)
@inject
async def get_daily_usage(
    date: str = Path(..., pattern=r"^\d{4}-\d{2}-\d{2}$", description="YYYY-MM-DD"),
    get_daily_usage_use_case: GetDailyUsageUseCase = Depends(
        Provide["get_daily_usage_use_case"]
    ),
) -> DailyUsageDTO:
    try:
        return await get_daily_usage_use_case.execute(date)
    except UsageNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except Exception as e:
        logger.error("usage.fetch_failed", date=date, error=str(e), exc_info=e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )
