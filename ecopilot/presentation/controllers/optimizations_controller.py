"""
Optimizations Router - Presentation Layer

Read access to optimization lifecycle records.
"""

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, status

from ecopilot.application.dtos.optimization_dto import OptimizationStateDTO
from ecopilot.application.use_cases.optimization_query_use_cases import (
    GetOptimizationUseCase,
)
from ecopilot.domain.entities.errors import OptimizationNotFoundError
from ecopilot.shared import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/optimizations", tags=["Optimizations"])


@router.get(
    "/{optimization_id}",
    response_model=OptimizationStateDTO,
    response_model_by_alias=True,
)
@inject
async def get_optimization(
    optimization_id: str,
    get_optimization_use_case: GetOptimizationUseCase = Depends(
        Provide["get_optimization_use_case"]
    ),
) -> OptimizationStateDTO:
    try:
        return await get_optimization_use_case.execute(optimization_id)
    except OptimizationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except Exception as e:
        logger.error(
            "optimizations.fetch_failed",
            optimization_id=optimization_id,
            error=str(e),
            exc_info=e,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )
