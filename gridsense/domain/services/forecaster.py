"""Trend projection with spike detection over a uniform price window."""

from __future__ import annotations

import math
from typing import Sequence

from gridsense.domain.entities.forecast import INSUFFICIENT_HISTORY_TAG, ForecastResult
from gridsense.domain.entities.reading import HistoryPoint
from gridsense.domain.services.regression import clamp, fit_linear_trend

CONFIDENCE_FLOOR = 0.05
CONFIDENCE_CEILING = 0.95
INSUFFICIENT_CONFIDENCE = 0.1


class TrendForecaster:
    """
    Projects the window's linear trend ``horizon_points`` steps ahead.

    Confidence grows with the fit quality and with the window size relative
    to ``min_points``, so a short window never reaches full confidence even
    with a perfect fit. Deterministic for identical inputs.
    """

    def __init__(self, spike_delta_pct: float = 15.0, min_points: int = 12):
        self.spike_delta_pct = spike_delta_pct
        self.min_points = max(1, min_points)

    def predict(
        self, window: Sequence[HistoryPoint], horizon_points: int
    ) -> ForecastResult:
        values = [point.price for point in window if math.isfinite(point.price)]
        horizon_points = max(0, int(horizon_points))
        last_price = values[-1] if values else 0.0

        if len(values) < 2:
            return ForecastResult(
                predicted_values=[round(last_price, 2)] * horizon_points,
                confidence=INSUFFICIENT_CONFIDENCE,
                predicted_spike=False,
                explanation=INSUFFICIENT_HISTORY_TAG,
            )

        fit = fit_linear_trend(values)
        future = [
            round(fit.value_at(len(values) + step), 2) for step in range(horizon_points)
        ]

        spike_level = last_price * (1 + self.spike_delta_pct / 100)
        predicted_spike = any(value >= spike_level for value in future)
        sample_factor = min(1.0, len(values) / self.min_points)
        confidence = clamp(
            0.1 + 0.7 * fit.r_squared * sample_factor,
            CONFIDENCE_FLOOR,
            CONFIDENCE_CEILING,
        )

        explanation = (
            f"slope={fit.slope:.4f}, r2={fit.r_squared:.3f}, samples={len(values)}, "
            f"sample_factor={sample_factor:.2f}, last_price={last_price:.2f}, "
            f"spike_level={spike_level:.2f}"
        )
        return ForecastResult(
            predicted_values=future,
            confidence=round(confidence, 2),
            predicted_spike=predicted_spike,
            explanation=explanation,
        )
