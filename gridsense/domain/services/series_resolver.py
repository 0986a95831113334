"""Derive the stable series key of a reading."""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional

from gridsense.domain.entities.reading import Reading

METER_FIELDS = ("meter_id", "meterId", "meter")


def _meter_identifier(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and math.isfinite(value):
        return str(int(value)) if value.is_integer() else repr(value)
    return None


class SeriesResolver:
    """
    Series identity: explicit meter id first, ``area:customer`` otherwise.

    Pure and total; an unresolvable meter never fails, it just degrades to
    the area/customer key.
    """

    def resolve(self, reading: Reading) -> str:
        return self.resolve_payload(
            reading.raw_payload, area=reading.area, customer=reading.customer
        )

    @staticmethod
    def resolve_payload(payload: Mapping[str, Any], area: str, customer: str) -> str:
        for name in METER_FIELDS:
            meter_id = _meter_identifier(payload.get(name))
            if meter_id:
                return meter_id
        return f"{area}:{customer}"
