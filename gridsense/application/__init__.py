"""
Application Layer Package

This package contains the application-specific business rules
and use cases. It orchestrates the ingest pipeline and the on-demand
prediction path on top of the domain services.
"""

# Re-export submodules
from gridsense.application import dtos, models, services, use_cases

__all__ = ["dtos", "models", "services", "use_cases"]
