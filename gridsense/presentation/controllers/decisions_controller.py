"""
Presentation Layer - Decisions Controller

Read access to the decisions stored per series.
"""

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException

from gridsense.application.dtos.decision_dto import DecisionDTO
from gridsense.application.use_cases.decision_use_cases import (
    DecisionNotFoundError,
    GetLatestDecisionUseCase,
)
from gridsense.domain.entities.errors import DomainError
from gridsense.main.container import AppContainer

from .error_mapping import http_error

router = APIRouter(prefix="/series", tags=["Decisions"])


@router.get(
    "/{series_id}/decisions/latest",
    response_model=DecisionDTO,
    summary="Latest stored decision of a series",
)
@inject
async def get_latest_decision(
    series_id: str,
    get_latest_decision_use_case: GetLatestDecisionUseCase = Depends(
        Provide[AppContainer.get_latest_decision_use_case]
    ),
) -> DecisionDTO:
    try:
        return await get_latest_decision_use_case.execute(series_id)
    except DecisionNotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    except DomainError as exc:
        raise http_error(exc) from exc
