"""Domain entities for recommended actions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List


class ActionType(str, Enum):
    """Recommended action, in decreasing order of priority."""

    CRITICAL_NOW = "CRITICAL_NOW"
    PREPARE_FOR_SPIKE = "PREPARE_FOR_SPIKE"
    OPPORTUNITY_CHARGE = "OPPORTUNITY_CHARGE"
    NORMAL_OPERATION = "NORMAL_OPERATION"


@dataclass(frozen=True, slots=True)
class Decision:
    """Outcome of classifying a reading against its forecast."""

    action_type: ActionType
    explanation: str
    current_price: float
    threshold: float
    predicted_values: List[float]
    predicted_spike: bool
    confidence_score: float
    timestamp: datetime

    def to_payload(self) -> Dict[str, Any]:
        """Wire representation shared by the cache, the bus and the API."""
        return {
            "actionType": self.action_type.value,
            "currentPrice": self.current_price,
            "threshold": self.threshold,
            "predictedValues": list(self.predicted_values),
            "predictedSpike": self.predicted_spike,
            "confidenceScore": self.confidence_score,
            "timestamp": self.timestamp.isoformat(),
            "explanation": self.explanation,
        }
