"""Domain entities produced by the forecasters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

INSUFFICIENT_HISTORY_TAG = "insufficient_history"


@dataclass(slots=True)
class ForecastResult:
    """Multi-step trend projection over a uniform window."""

    predicted_values: List[float]
    confidence: float
    predicted_spike: bool
    explanation: str

    @property
    def peak(self) -> Optional[float]:
        return max(self.predicted_values) if self.predicted_values else None


@dataclass(slots=True)
class Recommendation:
    """Action suggested from the expected relative price change."""

    action: str
    window_minutes: float
    note: str
    increase_pct: float = -3.0
    reduce_pct: float = 3.0

    def to_payload(self) -> Dict[str, Any]:
        return {
            "action": self.action,
            "window_minutes": self.window_minutes,
            "note": self.note,
            "thresholds": {
                "increase_pct": self.increase_pct,
                "reduce_pct": self.reduce_pct,
            },
        }


@dataclass(slots=True)
class SpotPrediction:
    """Single-point prediction at a horizon expressed in minutes."""

    predicted_price: float
    confidence: float
    trend: str
    change_pct: float
    volatility: float
    horizon_minutes: float
    lookback_used: int
    supporting_points: int
    interval_minutes: float
    steps_ahead: int
    explanation: str
    recommendation: Recommendation
    metadata: Dict[str, Any] = field(default_factory=dict)
