"""
Gateways Package - Domain Layer

This package contains interfaces defining gateway contracts
for external service communications. Specific implementations
are provided by the infrastructure layer.
"""

from .remote_prediction_gateway import IRemotePredictionGateway

__all__ = ["IRemotePredictionGateway"]
