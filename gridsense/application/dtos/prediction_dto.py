"""DTOs for on-demand spot price predictions."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from gridsense.domain.entities.forecast import Recommendation, SpotPrediction


class SpotPredictionRequestDTO(BaseModel):
    """
    Request for a single-point prediction.

    Inline ``records`` take precedence. Without them the history of
    ``series_id`` (or ``area:customer``) is loaded, restricted to
    ``[start, end]`` when both are given.
    """

    area: Optional[str] = Field(default=None, description="Price area")
    customer: Optional[str] = Field(default=None, description="Customer label")
    series_id: Optional[str] = Field(default=None, description="Series identifier")
    records: Optional[List[Dict[str, Any]]] = Field(
        default=None, description="Inline price records"
    )
    start: Optional[str] = Field(default=None, description="ISO-8601 range start")
    end: Optional[str] = Field(default=None, description="ISO-8601 range end")
    limit: Optional[int] = Field(default=None, ge=1, description="Maximum points")
    horizon_minutes: Optional[float] = Field(
        default=None, gt=0, description="Minutes ahead of the latest record"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "series_id": "m-0017",
                "start": "2025-03-01T00:00:00Z",
                "end": "2025-03-02T00:00:00Z",
                "horizon_minutes": 60,
            }
        }
    }


class RecommendationDTO(BaseModel):
    action: str
    window_minutes: float
    note: str
    thresholds: Dict[str, float] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, recommendation: Recommendation) -> "RecommendationDTO":
        return cls.model_validate(recommendation.to_payload())


class SpotPredictionMetadataDTO(BaseModel):
    horizon_minutes: float
    lookback_used: int
    supporting_points: int
    interval_minutes: float
    steps_ahead: Optional[int] = None


class SpotPredictionResponseDTO(BaseModel):
    """Prediction computed locally or returned by the remote service."""

    area: Optional[str] = None
    series_id: Optional[str] = None
    predicted_price: float
    confidence: float
    trend: str
    change_pct: float
    volatility: Optional[float] = None
    explanation: str = ""
    recommendation: Optional[RecommendationDTO] = None
    metadata: Optional[SpotPredictionMetadataDTO] = None
    source: str = Field(default="local", description="'local' or 'remote'")

    model_config = {"extra": "allow"}

    @classmethod
    def from_domain(
        cls,
        prediction: SpotPrediction,
        area: Optional[str] = None,
        series_id: Optional[str] = None,
    ) -> "SpotPredictionResponseDTO":
        return cls(
            area=area,
            series_id=series_id,
            predicted_price=prediction.predicted_price,
            confidence=prediction.confidence,
            trend=prediction.trend,
            change_pct=prediction.change_pct,
            volatility=prediction.volatility,
            explanation=prediction.explanation,
            recommendation=RecommendationDTO.from_domain(prediction.recommendation),
            metadata=SpotPredictionMetadataDTO(
                horizon_minutes=prediction.horizon_minutes,
                lookback_used=prediction.lookback_used,
                supporting_points=prediction.supporting_points,
                interval_minutes=prediction.interval_minutes,
                steps_ahead=prediction.steps_ahead,
            ),
        )
