"""
Horizon-aware spot price forecaster.

Records carry real timestamps, so the sampling interval is inferred from the
data and the requested horizon (minutes) is converted into a step count
before projecting the trend.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, List, Sequence

from gridsense.domain.entities.errors import ValidationError
from gridsense.domain.entities.forecast import Recommendation, SpotPrediction
from gridsense.domain.entities.reading import HistoryPoint
from gridsense.domain.services.normalizer import MessageNormalizer
from gridsense.domain.services.regression import (
    clamp,
    fit_linear_trend,
    median_interval_minutes,
    steps_for_horizon,
)

DEFAULT_INTERVAL_MINUTES = 60.0
R2_CEILING = 0.99
CONFIDENCE_FLOOR = 0.05
CONFIDENCE_CEILING = 0.98
TREND_SLOPE_THRESHOLD = 0.05

STRONG_CHANGE_PCT = 7.0
MILD_CHANGE_PCT = 3.0


def classify_trend(slope: float) -> str:
    # Absolute thresholds, independent of the price scale.
    if slope > TREND_SLOPE_THRESHOLD:
        return "up"
    if slope < -TREND_SLOPE_THRESHOLD:
        return "down"
    return "flat"


def recommend(change_pct: float, horizon_minutes: float) -> Recommendation:
    """Map the expected change to an action; boundaries favor the stronger one."""
    if change_pct >= STRONG_CHANGE_PCT:
        action, note = "reduce_now", "Prices expected to spike; shift discretionary loads."
    elif change_pct >= MILD_CHANGE_PCT:
        action, note = (
            "preemptive_reduce",
            "Upward trend detected; ramp down flexible usage soon.",
        )
    elif change_pct <= -STRONG_CHANGE_PCT:
        action, note = (
            "increase_now",
            "Prices expected to drop; charge or pre-heat while cheap.",
        )
    elif change_pct <= -MILD_CHANGE_PCT:
        action, note = (
            "opportunistic_use",
            "Mild decrease expected; consider advancing demand.",
        )
    else:
        action, note = "hold", "Flat outlook; run baseline schedule."
    return Recommendation(
        action=action,
        window_minutes=horizon_minutes,
        note=note,
        increase_pct=-MILD_CHANGE_PCT,
        reduce_pct=MILD_CHANGE_PCT,
    )


class SpotPriceForecaster:
    """Single-point forecaster used by on-demand and streaming requests."""

    def __init__(self, lookback: int = 24, min_points: int = 12):
        self.lookback = max(2, lookback)
        self.min_points = max(2, min_points)

    def normalize_records(self, records: Iterable[Any]) -> List[HistoryPoint]:
        """Drop unusable records and sort the rest chronologically."""
        points = [MessageNormalizer.to_history_point(record) for record in records]
        return sorted(
            (point for point in points if point is not None),
            key=lambda point: point.timestamp,
        )

    def predict(self, records: Iterable[Any], horizon_minutes: float = 60) -> SpotPrediction:
        """
        Predict the price ``horizon_minutes`` after the latest record.

        Raises:
            ValidationError: If fewer than ``min_points`` usable records remain
                or the horizon is not a finite number.
        """
        return self.predict_points(self.normalize_records(records), horizon_minutes)

    def predict_points(
        self, points: Sequence[HistoryPoint], horizon_minutes: float = 60
    ) -> SpotPrediction:
        if not math.isfinite(horizon_minutes):
            raise ValidationError("horizon_minutes must be a finite number")
        if len(points) < self.min_points:
            raise ValidationError(
                f"Not enough data points for prediction. Got {len(points)}, "
                f"need at least {self.min_points}.",
                details={"available_points": len(points), "required_points": self.min_points},
            )

        window = list(points[-self.lookback :])
        prices = [point.price for point in window]
        interval_minutes = (
            median_interval_minutes([point.timestamp for point in window])
            or DEFAULT_INTERVAL_MINUTES
        )
        steps_ahead = steps_for_horizon(horizon_minutes, interval_minutes)

        fit = fit_linear_trend(prices, r2_ceiling=R2_CEILING)
        predicted = fit.value_at(len(prices) - 1 + steps_ahead)

        volatility = fit.rmse
        stability = 1 / (1 + volatility)
        horizon_penalty = 1 / (1 + 0.4 * (steps_ahead - 1))
        confidence = clamp(
            0.6 * fit.r_squared + 0.3 * stability + 0.1 * horizon_penalty,
            CONFIDENCE_FLOOR,
            CONFIDENCE_CEILING,
        )

        last_price = prices[-1]
        change_pct = (predicted - last_price) / last_price * 100 if last_price else 0.0
        trend = classify_trend(fit.slope)

        explanation = (
            f"Trend={trend}, slope={fit.slope:.4f}, R2={fit.r_squared:.3f}, "
            f"interval={interval_minutes:.1f}m, horizon_steps={steps_ahead}"
        )
        return SpotPrediction(
            predicted_price=round(predicted, 2),
            confidence=round(confidence, 2),
            trend=trend,
            change_pct=round(change_pct, 2),
            volatility=round(volatility, 3),
            horizon_minutes=horizon_minutes,
            lookback_used=len(window),
            supporting_points=len(window),
            interval_minutes=interval_minutes,
            steps_ahead=steps_ahead,
            explanation=explanation,
            recommendation=recommend(change_pct, horizon_minutes),
        )
