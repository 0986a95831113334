"""Domain entities for normalized meter readings and series history."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping

from gridsense.shared.consts import UNKNOWN_LABEL


@dataclass(frozen=True, slots=True)
class Reading:
    """A single inbound price observation after normalization."""

    timestamp: datetime
    price: float
    area: str = UNKNOWN_LABEL
    customer: str = UNKNOWN_LABEL
    raw_payload: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.raw_payload, MappingProxyType):
            object.__setattr__(
                self, "raw_payload", MappingProxyType(dict(self.raw_payload))
            )


@dataclass(frozen=True, slots=True)
class HistoryPoint:
    """One (timestamp, price) pair of a series window."""

    timestamp: datetime
    price: float
