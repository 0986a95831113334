"""
Controllers Package - Presentation Layer

This package contains FastAPI controllers (routers) that handle
HTTP requests and responses. Controllers are responsible for
input validation, error handling, and mapping between API DTOs
and application layer use cases.
"""

from .decisions_controller import router as decisions_router
from .ingest_controller import router as ingest_router
from .predictions_controller import router as predictions_router
from .processing_controller import router as processing_router
from .system_controller import router as system_router

__all__ = [
    "decisions_router",
    "ingest_router",
    "predictions_router",
    "processing_router",
    "system_router",
]
