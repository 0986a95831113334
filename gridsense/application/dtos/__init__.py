"""
DTOs Package - Application Layer

This package contains Data Transfer Objects (DTOs) used for data exchange
between the application layer and the presentation layer.
"""

from .decision_dto import DecisionDTO, ForecastSummaryDTO, ProcessMessageResponseDTO
from .health_dto import DependencyStatusDTO, SystemHealthDTO
from .ingest_dto import IngestRequestDTO, IngestResponseDTO, IngestStatsDTO
from .prediction_dto import (
    RecommendationDTO,
    SpotPredictionMetadataDTO,
    SpotPredictionRequestDTO,
    SpotPredictionResponseDTO,
)

__all__ = [
    "DecisionDTO",
    "ForecastSummaryDTO",
    "ProcessMessageResponseDTO",
    "DependencyStatusDTO",
    "SystemHealthDTO",
    "IngestRequestDTO",
    "IngestResponseDTO",
    "IngestStatsDTO",
    "RecommendationDTO",
    "SpotPredictionMetadataDTO",
    "SpotPredictionRequestDTO",
    "SpotPredictionResponseDTO",
]
