"""Domain ports package."""

from .decision_sinks import IDecisionCache, IDecisionPublisher
from .health_check import IHealthCheckService

__all__ = ["IDecisionCache", "IDecisionPublisher", "IHealthCheckService"]
