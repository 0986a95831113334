"""Translate domain errors into HTTP errors."""

from fastapi import HTTPException, status

from gridsense.domain.entities.errors import (
    DependencyError,
    DomainError,
    InsufficientHistoryError,
    RemotePredictionHTTPError,
    RemotePredictionTimeoutError,
    ValidationError,
)

_STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (InsufficientHistoryError, status.HTTP_409_CONFLICT),
    (RemotePredictionTimeoutError, status.HTTP_504_GATEWAY_TIMEOUT),
    (RemotePredictionHTTPError, status.HTTP_502_BAD_GATEWAY),
    (DependencyError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def http_error(exc: DomainError) -> HTTPException:
    # Most specific first: the remote errors are DependencyErrors too.
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            status_code = code
            break
    return HTTPException(
        status_code=status_code,
        detail={"message": exc.message, "details": exc.details},
    )
