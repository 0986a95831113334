"""
Least-squares trend core shared by both forecasters.

The fit regresses price on the 0-based position in the window using the
closed form, so the result does not depend on any regression library.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from statistics import median
from typing import Optional, Sequence

import numpy as np

DENOMINATOR_EPSILON = 1e-9
VARIANCE_EPSILON = 1e-6


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


@dataclass(frozen=True, slots=True)
class LinearFit:
    slope: float
    intercept: float
    r_squared: float
    rmse: float
    samples: int

    def value_at(self, index: float) -> float:
        return self.intercept + self.slope * index


def fit_linear_trend(values: Sequence[float], r2_ceiling: float = 1.0) -> LinearFit:
    """
    Fit ``price = intercept + slope * index`` over ``values``.

    R² is measured against the window's own mean and clamped to
    ``[0, r2_ceiling]``. Both the slope denominator and the total variance
    are guarded against zero.
    """
    y = np.asarray(values, dtype=float)
    n = int(y.size)
    if n == 0:
        raise ValueError("Cannot fit a trend over an empty window")
    x = np.arange(n, dtype=float)

    sum_x = float(x.sum())
    sum_y = float(y.sum())
    sum_xy = float((x * y).sum())
    sum_x2 = float((x * x).sum())

    denominator = n * sum_x2 - sum_x * sum_x
    if abs(denominator) < DENOMINATOR_EPSILON:
        denominator = DENOMINATOR_EPSILON
    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n

    residuals = y - (intercept + slope * x)
    ss_res = float((residuals**2).sum())
    ss_tot = float(((y - sum_y / n) ** 2).sum()) or VARIANCE_EPSILON
    r_squared = clamp(1.0 - ss_res / ss_tot, 0.0, r2_ceiling)

    return LinearFit(
        slope=slope,
        intercept=intercept,
        r_squared=r_squared,
        rmse=math.sqrt(ss_res / n),
        samples=n,
    )


def median_interval_minutes(timestamps: Sequence[datetime]) -> Optional[float]:
    """Median of the positive gaps between consecutive timestamps, in minutes."""
    deltas = [
        (later - earlier).total_seconds() / 60.0
        for earlier, later in zip(timestamps, timestamps[1:])
    ]
    positive = [delta for delta in deltas if delta > 0]
    if not positive:
        return None
    return float(median(positive))


def steps_for_horizon(horizon_minutes: float, interval_minutes: float) -> int:
    """Number of sampling steps needed to cover the horizon (at least one)."""
    return max(1, math.ceil(horizon_minutes / interval_minutes))
