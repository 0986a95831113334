"""
Gateways Package - Infrastructure Layer

Concrete HTTP implementations of the domain gateway interfaces.
"""

from .remote_prediction_gateway import RemotePredictionGateway

__all__ = ["RemotePredictionGateway"]
