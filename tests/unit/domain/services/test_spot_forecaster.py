from __future__ import annotations

from datetime import timedelta

import pytest

from gridsense.domain.entities.errors import ValidationError
from gridsense.domain.services.spot_forecaster import (
    SpotPriceForecaster,
    classify_trend,
    recommend,
)
from tests.conftest import make_points, make_records

RISING = [100 + index for index in range(12)]


def test_predict_hourly_records_one_step_ahead() -> None:
    prediction = SpotPriceForecaster().predict(make_records(RISING), horizon_minutes=60)

    assert prediction.predicted_price == pytest.approx(112.0)
    assert prediction.steps_ahead == 1
    assert prediction.interval_minutes == pytest.approx(60.0)
    assert prediction.trend == "up"
    assert prediction.change_pct == pytest.approx(0.9)
    assert prediction.confidence == pytest.approx(0.98)
    assert prediction.lookback_used == 12
    assert prediction.recommendation.action == "hold"


def test_predict_converts_horizon_into_steps() -> None:
    records = make_records(RISING, step=timedelta(minutes=15))

    prediction = SpotPriceForecaster().predict(records, horizon_minutes=40)

    assert prediction.interval_minutes == pytest.approx(15.0)
    assert prediction.steps_ahead == 3
    assert prediction.predicted_price == pytest.approx(114.0)


def test_predict_long_horizon_recommends_reduction() -> None:
    prediction = SpotPriceForecaster().predict(make_records(RISING), horizon_minutes=540)

    assert prediction.predicted_price == pytest.approx(120.0)
    assert prediction.change_pct >= 7
    assert prediction.recommendation.action == "reduce_now"
    assert prediction.recommendation.window_minutes == 540


def test_predict_sorts_and_filters_records() -> None:
    records = make_records(list(reversed(RISING)))
    records.reverse()
    records.append({"DateTime": "garbage", "Price": 1})
    records.append({"DateTime": "2025-03-02T00:00:00Z"})

    prediction = SpotPriceForecaster().predict(records)

    assert prediction.supporting_points == 12
    assert prediction.trend == "down"


def test_predict_uses_only_lookback_window() -> None:
    prices = [500.0] * 10 + [float(value) for value in range(24)]

    prediction = SpotPriceForecaster(lookback=24).predict_points(make_points(prices))

    assert prediction.lookback_used == 24
    assert prediction.predicted_price == pytest.approx(24.0)


def test_predict_flat_series() -> None:
    prediction = SpotPriceForecaster().predict_points(make_points([40.0] * 12))

    assert prediction.trend == "flat"
    assert prediction.change_pct == 0.0
    assert prediction.volatility == 0.0


def test_predict_requires_minimum_points() -> None:
    with pytest.raises(ValidationError) as exc:
        SpotPriceForecaster(min_points=12).predict(make_records(RISING[:5]))

    assert exc.value.details == {"available_points": 5, "required_points": 12}


def test_predict_rejects_non_finite_horizon() -> None:
    with pytest.raises(ValidationError):
        SpotPriceForecaster().predict(make_records(RISING), horizon_minutes=float("nan"))


@pytest.mark.parametrize(
    ("change_pct", "action"),
    [
        (7.0, "reduce_now"),
        (3.0, "preemptive_reduce"),
        (2.99, "hold"),
        (-3.0, "opportunistic_use"),
        (-7.0, "increase_now"),
    ],
)
def test_recommend_tiers(change_pct, action) -> None:
    assert recommend(change_pct, 30).action == action


def test_classify_trend_thresholds() -> None:
    assert classify_trend(0.06) == "up"
    assert classify_trend(-0.06) == "down"
    assert classify_trend(0.05) == "flat"


@pytest.mark.parametrize(
    ("prices", "horizon_minutes", "at_floor"),
    [
        ([1e6 if index % 2 == 0 else -1e6 for index in range(12)], 30000, True),
        ([1e6 if index % 2 == 0 else -1e6 for index in range(12)], 60, False),
        ([40, 55, 38, 61, 42, 70, 35, 66, 44, 58, 39, 72], 1440, False),
        ([100.0 + index * 0.5 for index in range(12)], 30000, False),
    ],
)
def test_confidence_stays_within_bounds(prices, horizon_minutes, at_floor) -> None:
    prediction = SpotPriceForecaster().predict(
        make_records(prices), horizon_minutes=horizon_minutes
    )

    assert 0.05 <= prediction.confidence <= 0.98
    if at_floor:
        assert prediction.confidence == 0.05
