"""
Infrastructure Layer Package

This package contains implementations of interfaces defined in the
domain layer, dealing with external concerns such as Redis, MongoDB,
Kafka and remote HTTP services.
"""

from gridsense.infrastructure import repositories

__all__ = ["repositories"]
