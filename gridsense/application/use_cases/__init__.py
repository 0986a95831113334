"""
Use Cases Package - Application Layer

This package contains use cases that implement the business logic
of the application. Use cases orchestrate the flow of data to and from
the entities and implement the business rules of the application.
"""

from .decision_use_cases import DecisionNotFoundError, GetLatestDecisionUseCase
from .health_use_cases import GetHealthStatusUseCase
from .process_message_use_case import ProcessMessageUseCase
from .spot_prediction_use_case import SpotPredictionUseCase

__all__ = [
    "DecisionNotFoundError",
    "GetLatestDecisionUseCase",
    "GetHealthStatusUseCase",
    "ProcessMessageUseCase",
    "SpotPredictionUseCase",
]
