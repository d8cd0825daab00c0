"""
Sensors Router - Presentation Layer

Ingestion endpoint, the entry point of the pipeline.
"""

from typing import Any, Dict

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ecopilot.application.dtos.sensor_dto import (
    SensorIngestRequestDTO,
    SensorIngestResponseDTO,
    describe_ingest_error,
)
from ecopilot.application.use_cases.sensor_ingestion_use_case import (
    SensorIngestionError,
    SensorIngestionUseCase,
)
from ecopilot.shared import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/sensor", tags=["Sensors"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "error": message}
    )


@router.post(
    "/ingest",
    status_code=status.HTTP_201_CREATED,
    response_model=SensorIngestResponseDTO,
    response_model_by_alias=True,
)
@inject
async def ingest_sensor_reading(
    payload: Dict[str, Any] = Body(...),
    sensor_ingestion_use_case: SensorIngestionUseCase = Depends(
        Provide["sensor_ingestion_use_case"]
    ),
):
    """
    Accept one sensor reading.

    Validation happens here rather than in FastAPI so rejected bodies get
    the pipeline's ``{"success": false, "error": ...}`` 400 shape.
    """
    try:
        request = SensorIngestRequestDTO.model_validate(payload)
    except ValidationError as e:
        message = describe_ingest_error(e)
        logger.warning("sensors.ingest.rejected", error=message)
        return _error(status.HTTP_400_BAD_REQUEST, message)

    try:
        response = await sensor_ingestion_use_case.execute(request)
    except SensorIngestionError as e:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, e.message)

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=response.model_dump(mode="json", by_alias=True),
    )
