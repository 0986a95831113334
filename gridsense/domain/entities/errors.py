"""
Domain Errors

Error taxonomy shared by the ingest pipeline, the on-demand prediction path
and the collaborators behind them.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(DomainError):
    """Raised when an inbound record is malformed or incomplete."""


class InsufficientHistoryError(DomainError):
    """Raised when a series does not hold enough points to forecast yet."""

    def __init__(self, series_id: str, required: int, available: int):
        self.series_id = series_id
        self.required = required
        self.available = available
        super().__init__(
            f"Insufficient history for series {series_id}. "
            f"Need {required} points, have {available}.",
            details={
                "series_id": series_id,
                "required_points": required,
                "available_points": available,
            },
        )


class DependencyError(DomainError):
    """Raised when a store, cache or bus collaborator fails."""


class TransportError(DependencyError):
    """Raised when a bus or store connection cannot be established."""


class RemotePredictionError(DependencyError):
    """Base error for the remote prediction service."""


class RemotePredictionTimeoutError(RemotePredictionError):
    """The remote prediction service did not answer in time."""


class RemotePredictionHTTPError(RemotePredictionError):
    """The remote prediction service answered with a non-2xx status."""

    def __init__(self, status_code: int, body: Any = None):
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"Remote prediction service responded with status {status_code}",
            details={"status_code": status_code, "body": body},
        )
