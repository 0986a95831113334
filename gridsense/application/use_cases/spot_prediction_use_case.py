"""Use case serving on-demand spot price predictions."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from gridsense.application.dtos.prediction_dto import (
    SpotPredictionRequestDTO,
    SpotPredictionResponseDTO,
)
from gridsense.application.models import PipelineCapabilities
from gridsense.domain.entities.errors import (
    DependencyError,
    RemotePredictionError,
    ValidationError,
)
from gridsense.domain.entities.reading import HistoryPoint
from gridsense.domain.services.normalizer import parse_timestamp
from gridsense.domain.services.spot_forecaster import SpotPriceForecaster
from gridsense.shared.consts import UNKNOWN_LABEL
from gridsense.shared.logging import get_logger

logger = get_logger(__name__)

DEFAULT_HISTORY_LIMIT = 500

Records = Union[List[Dict[str, Any]], List[HistoryPoint]]


class SpotPredictionUseCase:
    """
    Resolve the records of a request and predict the next spot price.

    When a remote prediction service is connected the hydrated request is
    forwarded to it instead of being computed in process.
    """

    def __init__(
        self,
        capabilities: PipelineCapabilities,
        forecaster: SpotPriceForecaster,
        *,
        default_horizon_minutes: float = 60.0,
        max_history_limit: int = 1000,
    ) -> None:
        self._capabilities = capabilities
        self._forecaster = forecaster
        self._default_horizon_minutes = default_horizon_minutes
        self._max_history_limit = max(1, max_history_limit)

    async def execute(self, request: SpotPredictionRequestDTO) -> SpotPredictionResponseDTO:
        horizon = (
            request.horizon_minutes
            if request.horizon_minutes is not None
            else self._default_horizon_minutes
        )
        records, series_id = await self._resolve_records(request)

        remote = self._capabilities.remote_prediction
        if remote is not None:
            return await self._predict_remote(request, records, series_id, horizon)

        prediction = self._forecaster.predict(records, horizon)
        logger.info(
            "prediction.spot_computed",
            series_id=series_id,
            area=request.area,
            predicted_price=prediction.predicted_price,
            points=prediction.supporting_points,
        )
        return SpotPredictionResponseDTO.from_domain(
            prediction, area=request.area, series_id=series_id
        )

    async def _resolve_records(
        self, request: SpotPredictionRequestDTO
    ) -> Tuple[Records, Optional[str]]:
        if request.records:
            return request.records, request.series_id

        has_range = request.start is not None or request.end is not None
        if request.records is not None and not has_range and request.limit is None:
            raise ValidationError("records must be a non-empty list")

        series_id = self._series_for(request)
        limit = self._limit_for(request)
        history_store = self._capabilities.history_store

        try:
            if has_range:
                start, end = self._range_for(request)
                points = await history_store.fetch_range(series_id, start, end, limit)
            else:
                points = await history_store.fetch_window(series_id, limit)
        except ValidationError:
            raise
        except Exception as exc:
            logger.warning("prediction.history_failed", series_id=series_id, error=str(exc))
            raise DependencyError(
                "History store not available for prediction",
                details={"series_id": series_id},
            ) from exc

        if not points:
            raise ValidationError(
                "No historical data found for prediction",
                details={"area": request.area, "series_id": series_id},
            )
        return list(points), series_id

    def _series_for(self, request: SpotPredictionRequestDTO) -> str:
        if request.series_id and request.series_id.strip():
            return request.series_id.strip()
        if request.area and request.area.strip():
            customer = (request.customer or "").strip() or UNKNOWN_LABEL
            return f"{request.area.strip()}:{customer}"
        raise ValidationError("area or series_id is required for prediction")

    def _limit_for(self, request: SpotPredictionRequestDTO) -> int:
        if request.limit is None:
            return min(DEFAULT_HISTORY_LIMIT, self._max_history_limit)
        return min(request.limit, self._max_history_limit)

    @staticmethod
    def _range_for(request: SpotPredictionRequestDTO):
        start = parse_timestamp(request.start)
        end = parse_timestamp(request.end)
        if start is None or end is None:
            raise ValidationError("start and end must be valid ISO timestamps")
        if start > end:
            raise ValidationError("start must be before end")
        return start, end

    async def _predict_remote(
        self,
        request: SpotPredictionRequestDTO,
        records: Records,
        series_id: Optional[str],
        horizon: float,
    ) -> SpotPredictionResponseDTO:
        payload = request.model_dump(exclude_none=True)
        payload["records"] = [_serialize_record(record) for record in records]
        payload["horizon_minutes"] = horizon
        if series_id:
            payload["series_id"] = series_id
        for key in ("start", "end", "limit"):
            payload.pop(key, None)

        body = await self._capabilities.remote_prediction.predict_spot_price(payload)
        try:
            response = SpotPredictionResponseDTO.model_validate(body)
        except PydanticValidationError as exc:
            raise RemotePredictionError(
                "Remote prediction service returned an unexpected payload",
                details={"errors": exc.errors(include_url=False)},
            ) from exc
        response.source = "remote"
        return response


def _serialize_record(record: Any) -> Any:
    if isinstance(record, HistoryPoint):
        return {"timestamp": record.timestamp.isoformat(), "price": record.price}
    return record
