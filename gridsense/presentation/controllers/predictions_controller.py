"""
Presentation Layer - Predictions Controller

Exposes on-demand spot price predictions.
"""

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException

from gridsense.application.dtos.prediction_dto import (
    SpotPredictionRequestDTO,
    SpotPredictionResponseDTO,
)
from gridsense.application.use_cases.spot_prediction_use_case import (
    SpotPredictionUseCase,
)
from gridsense.domain.entities.errors import DomainError
from gridsense.main.container import AppContainer
from gridsense.shared import get_logger

from .error_mapping import http_error

logger = get_logger(__name__)

router = APIRouter(prefix="/predict", tags=["Predictions"])


@router.post(
    "/spot-price",
    response_model=SpotPredictionResponseDTO,
    summary="Predict the spot price at a horizon",
    description="""
    Predict the price `horizon_minutes` after the latest record. Records are
    taken from the request or loaded from the series history. When a remote
    prediction service is configured the request is forwarded to it.
    """,
)
@inject
async def predict_spot_price(
    request: SpotPredictionRequestDTO,
    spot_prediction_use_case: SpotPredictionUseCase = Depends(
        Provide[AppContainer.spot_prediction_use_case]
    ),
) -> SpotPredictionResponseDTO:
    try:
        return await spot_prediction_use_case.execute(request)
    except DomainError as exc:
        logger.info("prediction.rejected", error=exc.message)
        raise http_error(exc) from exc
    except Exception as exc:  # pragma: no cover
        logger.error("prediction.unexpected_error", error=str(exc), exc_info=exc)
        raise HTTPException(status_code=500, detail="Internal server error") from exc
