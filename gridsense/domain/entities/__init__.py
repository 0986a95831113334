"""
Domain Entities Package

Readings, forecasts, decisions and the error taxonomy of the service.
"""

from .decision import ActionType, Decision
from .errors import (
    DependencyError,
    DomainError,
    InsufficientHistoryError,
    RemotePredictionError,
    RemotePredictionHTTPError,
    RemotePredictionTimeoutError,
    TransportError,
    ValidationError,
)
from .forecast import (
    INSUFFICIENT_HISTORY_TAG,
    ForecastResult,
    Recommendation,
    SpotPrediction,
)
from .health import DependencyStatus, ServiceStatus, SystemHealth
from .ingest import IngestOutcome
from .reading import HistoryPoint, Reading

__all__ = [
    "ActionType",
    "Decision",
    "DomainError",
    "ValidationError",
    "InsufficientHistoryError",
    "DependencyError",
    "TransportError",
    "RemotePredictionError",
    "RemotePredictionHTTPError",
    "RemotePredictionTimeoutError",
    "INSUFFICIENT_HISTORY_TAG",
    "ForecastResult",
    "Recommendation",
    "SpotPrediction",
    "DependencyStatus",
    "ServiceStatus",
    "SystemHealth",
    "IngestOutcome",
    "HistoryPoint",
    "Reading",
]
