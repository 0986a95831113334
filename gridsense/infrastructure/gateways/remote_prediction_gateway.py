"""
Infrastructure Gateway - Remote Prediction Service

httpx client forwarding spot price requests to a remote prediction service.
A timeout and a non-2xx answer surface as distinct errors so callers can
retry the former safely.
"""

from typing import Any, Dict

import httpx

from gridsense.domain.entities.errors import (
    RemotePredictionError,
    RemotePredictionHTTPError,
    RemotePredictionTimeoutError,
)
from gridsense.domain.gateways.remote_prediction_gateway import IRemotePredictionGateway
from gridsense.shared.logging import get_logger

logger = get_logger(__name__)

SPOT_PRICE_PATH = "/predict/spot-price"


class RemotePredictionGateway(IRemotePredictionGateway):
    """Implementation of the remote prediction gateway using HTTP client."""

    def __init__(self, base_url: str, timeout: float = 10.0):
        """
        Initialize the gateway.

        Args:
            base_url: Base URL of the prediction service (e.g., "http://predictor:5000")
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def predict_spot_price(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}{SPOT_PRICE_PATH}"
        logger.info("remote_prediction.request", url=url)

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=payload)
                response.raise_for_status()
                return response.json()

        except httpx.TimeoutException as exc:
            logger.warning("remote_prediction.timeout", url=url, timeout=self.timeout)
            raise RemotePredictionTimeoutError(
                f"Remote prediction request exceeded {self.timeout}s"
            ) from exc

        except httpx.HTTPStatusError as exc:
            logger.warning(
                "remote_prediction.http_error",
                url=url,
                status_code=exc.response.status_code,
            )
            raise RemotePredictionHTTPError(
                exc.response.status_code, _response_body(exc.response)
            ) from exc

        except httpx.RequestError as exc:
            logger.warning("remote_prediction.request_error", url=url, error=str(exc))
            raise RemotePredictionError(
                f"Remote prediction request failed: {exc}"
            ) from exc

        except ValueError as exc:
            raise RemotePredictionError(
                "Remote prediction service returned invalid JSON"
            ) from exc


def _response_body(response: httpx.Response) -> Any:
    if "application/json" in response.headers.get("content-type", ""):
        try:
            return response.json()
        except ValueError:
            pass
    return response.text
