"""DTOs for decisions produced by the processing pipeline."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from gridsense.application.models import PipelineResult
from gridsense.domain.entities.decision import ActionType, Decision


class DecisionDTO(BaseModel):
    """Decision as stored and published, with camelCase wire names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    series_id: Optional[str] = Field(default=None, description="Resolved series")
    action_type: ActionType = Field(description="Recommended action")
    explanation: str = Field(description="Why the action was chosen")
    current_price: float = Field(description="Price of the triggering reading")
    threshold: float = Field(description="Configured critical price threshold")
    predicted_values: List[float] = Field(default_factory=list)
    predicted_spike: bool = Field(description="Whether the forecast crosses the spike level")
    confidence_score: float = Field(ge=0, le=1)
    timestamp: datetime = Field(description="Timestamp of the triggering reading")

    @classmethod
    def from_domain(
        cls, decision: Decision, series_id: Optional[str] = None
    ) -> "DecisionDTO":
        return cls(
            series_id=series_id,
            action_type=decision.action_type,
            explanation=decision.explanation,
            current_price=decision.current_price,
            threshold=decision.threshold,
            predicted_values=list(decision.predicted_values),
            predicted_spike=decision.predicted_spike,
            confidence_score=decision.confidence_score,
            timestamp=decision.timestamp,
        )

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "DecisionDTO":
        """Build from a durable-store row (camelCase keys plus seriesId)."""
        return cls.model_validate(
            {key: value for key, value in document.items() if key != "_id"}
        )


class ForecastSummaryDTO(BaseModel):
    predicted_values: List[float] = Field(default_factory=list)
    confidence: float
    predicted_spike: bool
    explanation: str


class ProcessMessageResponseDTO(BaseModel):
    """Response of the direct processing endpoint."""

    series_id: str = Field(description="Resolved series identifier")
    decision: DecisionDTO
    forecast: ForecastSummaryDTO
    writes: Dict[str, bool] = Field(
        default_factory=dict, description="Sink targets and whether each accepted the write"
    )

    @classmethod
    def from_result(cls, result: PipelineResult) -> "ProcessMessageResponseDTO":
        return cls(
            series_id=result.series_id,
            decision=DecisionDTO.from_domain(result.decision, result.series_id),
            forecast=ForecastSummaryDTO(
                predicted_values=list(result.forecast.predicted_values),
                confidence=result.forecast.confidence,
                predicted_spike=result.forecast.predicted_spike,
                explanation=result.forecast.explanation,
            ),
            writes=dict(result.writes),
        )
