"""
Presentation Layer - Processing Controller

Runs a single record through the pipeline, bypassing admission control.
"""

from typing import Any, Dict

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Body, Depends, HTTPException

from gridsense.application.dtos.decision_dto import ProcessMessageResponseDTO
from gridsense.application.use_cases.process_message_use_case import (
    ProcessMessageUseCase,
)
from gridsense.domain.entities.errors import DomainError
from gridsense.main.container import AppContainer
from gridsense.shared import get_logger

from .error_mapping import http_error

logger = get_logger(__name__)

router = APIRouter(prefix="/process", tags=["Processing"])


@router.post(
    "/message",
    response_model=ProcessMessageResponseDTO,
    summary="Process one meter reading",
    description="""
    Normalize the record, append it to its series history, forecast the
    series and return the resulting decision. Answers 409 while the series
    does not hold enough history yet.
    """,
)
@inject
async def process_message(
    payload: Dict[str, Any] = Body(
        ...,
        examples=[
            {
                "DateTime": "2025-03-02T10:00:00Z",
                "Price": 42.1,
                "AREA": "NO1",
                "CUSTOMER": "c-17",
                "meter_id": "m-0017",
            }
        ],
    ),
    process_message_use_case: ProcessMessageUseCase = Depends(
        Provide[AppContainer.process_message_use_case]
    ),
) -> ProcessMessageResponseDTO:
    try:
        result = await process_message_use_case.execute(payload)
    except DomainError as exc:
        raise http_error(exc) from exc
    except Exception as exc:  # pragma: no cover
        logger.error("processing.unexpected_error", error=str(exc), exc_info=exc)
        raise HTTPException(status_code=500, detail="Internal server error") from exc
    return ProcessMessageResponseDTO.from_result(result)
