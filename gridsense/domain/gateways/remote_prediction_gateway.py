"""
Domain Gateway - Remote Prediction Service

Contract for delegating spot price predictions to a remote service.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class IRemotePredictionGateway(ABC):
    """Interface for the remote spot prediction service."""

    @abstractmethod
    async def predict_spot_price(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Forward a hydrated prediction request.

        Args:
            payload: Request body including the resolved records

        Returns:
            The remote service's JSON response

        Raises:
            RemotePredictionTimeoutError: When the service does not answer in time
            RemotePredictionHTTPError: When the service answers with a non-2xx status
            RemotePredictionError: On any other transport failure
        """
        pass
