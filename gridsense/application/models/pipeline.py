"""Lightweight settings and result structures of the ingest pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from gridsense.domain.entities.decision import Decision
from gridsense.domain.entities.forecast import ForecastResult
from gridsense.domain.entities.reading import Reading


@dataclass(frozen=True)
class PipelineConfig:
    """Subset of configuration required by the processing use case."""

    history_lookback_points: int = 48
    min_history_points: int = 12
    horizon_points: int = 4


@dataclass(frozen=True)
class StreamConfig:
    """Subset of configuration required by the ingest coordinator."""

    max_messages_per_second: int = 200
    process_every_n: int = 1
    stream_buffer_size: int = 48
    max_stream_series: int = 100
    stream_horizon_minutes: float = 60.0
    stream_topic: str = "energy-stream-predictions"


@dataclass(frozen=True)
class IngestedReading:
    series_id: str
    reading: Reading


@dataclass
class PipelineResult:
    series_id: str
    reading: Reading
    forecast: ForecastResult
    decision: Decision
    writes: Dict[str, bool] = field(default_factory=dict)
