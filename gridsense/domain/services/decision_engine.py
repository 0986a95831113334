"""Classifies a reading and its forecast into a recommended action."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, Tuple

from gridsense.domain.entities.decision import ActionType, Decision
from gridsense.domain.entities.forecast import ForecastResult
from gridsense.domain.entities.reading import Reading

HourRange = Tuple[int, int]

DEFAULT_OFFPEAK_HOURS = "0-6,22-23"


def parse_offpeak_ranges(raw: str) -> List[HourRange]:
    """
    Parse ``"0-6,22-23"`` style hour ranges.

    A single hour (``"3"``) is a range of one. Blocks that are not hours
    between 0 and 23, or whose start is after their end, are skipped.
    """
    ranges: List[HourRange] = []
    for chunk in (raw or "").split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        start_text, _, end_text = chunk.partition("-")
        try:
            start = int(start_text)
            end = int(end_text) if end_text.strip() else start
        except ValueError:
            continue
        if not (0 <= start <= 23 and 0 <= end <= 23) or start > end:
            continue
        ranges.append((start, end))
    return ranges


class DecisionEngine:
    """
    Pure classifier. Rules are evaluated in priority order and the first
    match wins: a critical current price beats a predicted spike, which
    beats an off-peak low-price opportunity.
    """

    def __init__(
        self,
        price_threshold: float = 80.0,
        low_price_threshold: float = 25.0,
        offpeak_hours: Optional[Iterable[Sequence[int]]] = None,
    ):
        self.price_threshold = price_threshold
        self.low_price_threshold = low_price_threshold
        if offpeak_hours is None:
            offpeak_hours = parse_offpeak_ranges(DEFAULT_OFFPEAK_HOURS)
        self.offpeak_hours: List[HourRange] = [
            (int(start), int(end)) for start, end in offpeak_hours
        ]

    def is_offpeak(self, timestamp: datetime) -> bool:
        # Hour of the timestamp's own offset; naive values are UTC.
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        hour = timestamp.hour
        return any(start <= hour <= end for start, end in self.offpeak_hours)

    def decide(self, reading: Reading, forecast: ForecastResult) -> Decision:
        price = reading.price

        if price >= self.price_threshold:
            action = ActionType.CRITICAL_NOW
            explanation = (
                f"Current price {price} >= threshold {self.price_threshold}; "
                "reduce usage immediately."
            )
        elif forecast.predicted_spike:
            peak = forecast.peak if forecast.peak is not None else price
            action = ActionType.PREPARE_FOR_SPIKE
            explanation = (
                f"Predicted spike with forecast peak {peak:.2f} (>{price}); "
                "pre-charge or adjust before spike."
            )
        elif price <= self.low_price_threshold and self.is_offpeak(reading.timestamp):
            action = ActionType.OPPORTUNITY_CHARGE
            explanation = (
                f"Price {price} is low and off-peak hour {reading.timestamp.hour}; "
                "charge/pre-heat now."
            )
        else:
            action = ActionType.NORMAL_OPERATION
            explanation = (
                "No spike predicted and price not critically high; run baseline schedule."
            )

        return Decision(
            action_type=action,
            explanation=explanation,
            current_price=price,
            threshold=self.price_threshold,
            predicted_values=list(forecast.predicted_values),
            predicted_spike=forecast.predicted_spike,
            confidence_score=forecast.confidence,
            timestamp=reading.timestamp,
        )
