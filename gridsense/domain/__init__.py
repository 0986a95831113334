"""
Domain Layer Package

Readings, forecasts, decisions and the pure services that derive them. It
holds no dependency on frameworks or infrastructure concerns.
"""

# Re-export submodules
from gridsense.domain import entities, gateways, ports, repositories, services

__all__ = ["entities", "gateways", "ports", "repositories", "services"]
