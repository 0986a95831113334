"""
Message normalization.

Inbound records arrive from several producers that never agreed on field
names. This module maps every known variant onto a canonical ``Reading``.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Sequence

from gridsense.domain.entities.errors import ValidationError
from gridsense.domain.entities.reading import HistoryPoint, Reading
from gridsense.shared.consts import UNKNOWN_LABEL
from gridsense.shared.logging import get_logger

logger = get_logger(__name__)

TIMESTAMP_FIELDS = ("DateTime", "timestamp", "time", "date")
PRICE_FIELDS = ("Price", "price", "spot_price")
AREA_FIELDS = ("AREA", "area")
CUSTOMER_FIELDS = ("CUSTOMER", "customer")


def first_present(payload: Mapping[str, Any], fields: Sequence[str]) -> Any:
    """Return the first value that is neither missing, None nor a blank string."""
    for name in fields:
        value = payload.get(name)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse ISO-8601 strings, epoch seconds or datetimes.

    Naive values are interpreted as UTC. Returns None when the value cannot
    be understood.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = f"{text[:-1]}+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def coerce_price(value: Any) -> float:
    """Convert a raw price to a finite float or raise ValidationError."""
    if value is None:
        raise ValidationError("Missing price in message")
    if isinstance(value, bool):
        raise ValidationError(f"Invalid price value: {value!r}")
    try:
        price = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        raise ValidationError(
            f"Invalid price value: {value!r}", details={"price": repr(value)}
        ) from None
    if not math.isfinite(price):
        raise ValidationError(
            f"Invalid price value: {value!r}", details={"price": repr(value)}
        )
    return price


def _label(value: Any) -> str:
    if value is None:
        return UNKNOWN_LABEL
    text = str(value).strip()
    return text or UNKNOWN_LABEL


class MessageNormalizer:
    """Turns heterogeneous raw records into immutable readings."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def normalize(self, payload: Mapping[str, Any]) -> Reading:
        """
        Build a Reading from a raw record.

        The price is mandatory. A missing or unparseable timestamp falls back
        to the current instant, so callers must not rely on the event time
        being exact.

        Raises:
            ValidationError: If the payload is not a mapping or the price is
                missing or not finite.
        """
        if not isinstance(payload, Mapping):
            raise ValidationError("Message must be a JSON object")

        price = coerce_price(first_present(payload, PRICE_FIELDS))
        raw_timestamp = first_present(payload, TIMESTAMP_FIELDS)
        timestamp = parse_timestamp(raw_timestamp)
        if timestamp is None:
            timestamp = self._clock()
            logger.warning(
                "normalizer.timestamp_fallback",
                raw_timestamp=repr(raw_timestamp),
                fallback=timestamp.isoformat(),
            )

        return Reading(
            timestamp=timestamp,
            price=price,
            area=_label(first_present(payload, AREA_FIELDS)),
            customer=_label(first_present(payload, CUSTOMER_FIELDS)),
            raw_payload=payload,
        )

    @staticmethod
    def to_history_point(record: Any) -> Optional[HistoryPoint]:
        """
        Strict conversion used by the spot forecaster.

        Unlike ``normalize`` there is no fallback: records without a parseable
        timestamp or a finite price are dropped (None).
        """
        if isinstance(record, HistoryPoint):
            return record if math.isfinite(record.price) else None
        if isinstance(record, Reading):
            return HistoryPoint(timestamp=record.timestamp, price=record.price)
        if not isinstance(record, Mapping):
            return None

        timestamp = parse_timestamp(first_present(record, TIMESTAMP_FIELDS))
        if timestamp is None:
            return None
        try:
            price = coerce_price(first_present(record, PRICE_FIELDS))
        except ValidationError:
            return None
        return HistoryPoint(timestamp=timestamp, price=price)
