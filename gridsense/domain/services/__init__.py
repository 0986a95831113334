"""Pure domain services of the ingest, forecast and decision pipeline."""

from .admission import NthSampler, RateWindow
from .decision_engine import DecisionEngine, parse_offpeak_ranges
from .forecaster import TrendForecaster
from .normalizer import MessageNormalizer
from .series_resolver import SeriesResolver
from .spot_forecaster import SpotPriceForecaster
from .stream_buffer import StreamBuffer

__all__ = [
    "DecisionEngine",
    "MessageNormalizer",
    "NthSampler",
    "RateWindow",
    "SeriesResolver",
    "SpotPriceForecaster",
    "StreamBuffer",
    "TrendForecaster",
    "parse_offpeak_ranges",
]
