"""
Admission-controlled ingest loop.

One coordinator is constructed per running consumer and owns its rate
window, sampler, stream buffer and counters. None of that state is shared
between instances.
"""

from __future__ import annotations

import json
import time
from collections import Counter
from typing import Any, AsyncIterable, Callable, Dict, Mapping, Optional

from gridsense.application.models import IngestedReading, StreamConfig
from gridsense.application.use_cases.process_message_use_case import (
    ProcessMessageUseCase,
)
from gridsense.domain.entities.errors import InsufficientHistoryError, ValidationError
from gridsense.domain.entities.forecast import SpotPrediction
from gridsense.domain.entities.ingest import IngestOutcome
from gridsense.domain.ports.decision_sinks import IDecisionPublisher
from gridsense.domain.services.admission import NthSampler, RateWindow
from gridsense.domain.services.spot_forecaster import SpotPriceForecaster
from gridsense.domain.services.stream_buffer import StreamBuffer
from gridsense.shared.logging import get_logger

logger = get_logger(__name__)


def parse_body(body: Any) -> Optional[Mapping[str, Any]]:
    """Decode a raw bus or HTTP body into a JSON object, or None."""
    if isinstance(body, Mapping):
        return body
    if isinstance(body, (bytes, bytearray)):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if not isinstance(body, str):
        return None
    try:
        decoded = json.loads(body)
    except ValueError:
        return None
    return decoded if isinstance(decoded, Mapping) else None


def stream_payload(ingested: IngestedReading, prediction: SpotPrediction) -> Dict[str, Any]:
    reading = ingested.reading
    return {
        "series_id": ingested.series_id,
        "area": reading.area,
        "customer": reading.customer,
        "ingest_timestamp": reading.timestamp.isoformat(),
        "predicted_price_next_minutes": prediction.horizon_minutes,
        "predicted_price": prediction.predicted_price,
        "confidence": prediction.confidence,
        "trend": prediction.trend,
        "change_pct": prediction.change_pct,
        "recommendation": prediction.recommendation.to_payload(),
        "meta": {
            "supporting_points": prediction.supporting_points,
            "lookback_used": prediction.lookback_used,
            "interval_minutes": prediction.interval_minutes,
        },
    }


class IngestCoordinator:
    """
    Drives consumed messages through admission, sampling and processing.

    Each message ends in exactly one IngestOutcome. Unparseable bodies are
    rejected before admission and return None. Messages are handled one at
    a time; a message that was admitted and sampled in always runs to
    completion.
    """

    def __init__(
        self,
        process_message: ProcessMessageUseCase,
        spot_forecaster: SpotPriceForecaster,
        config: StreamConfig,
        publisher: Optional[IDecisionPublisher] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._process_message = process_message
        self._spot_forecaster = spot_forecaster
        self._config = config
        self._publisher = publisher
        self._rate_window = RateWindow(config.max_messages_per_second, clock=clock)
        self._sampler = NthSampler(config.process_every_n)
        self.stream_buffer = StreamBuffer(
            config.stream_buffer_size, config.max_stream_series
        )
        self.counters: Counter = Counter()
        self.consumer_running = False
        self.disabled_reason: Optional[str] = None

    async def consume(self, body: Any) -> Optional[IngestOutcome]:
        self.counters["received"] += 1
        payload = parse_body(body)
        if payload is None:
            self.counters["rejected"] += 1
            logger.debug("ingest.rejected")
            return None

        if not self._rate_window.allow():
            outcome = IngestOutcome.RATE_LIMITED
            logger.debug("ingest.rate_limited")
        elif not self._sampler.should_process():
            outcome = IngestOutcome.SAMPLED_OUT
        else:
            outcome = await self._process(payload)

        self.counters[outcome.value] += 1
        return outcome

    async def run(self, messages: AsyncIterable[Any]) -> None:
        """Consume until the message source is exhausted or cancelled."""
        self.consumer_running = True
        try:
            async for body in messages:
                await self.consume(body)
        finally:
            self.consumer_running = False

    def disable(self, reason: str) -> None:
        self.consumer_running = False
        self.disabled_reason = reason
        logger.warning("ingest.consumer_disabled", reason=reason)

    def stats(self) -> Dict[str, int]:
        return dict(self.counters)

    async def _process(self, payload: Mapping[str, Any]) -> IngestOutcome:
        try:
            ingested = self._process_message.prepare(payload)
        except ValidationError as exc:
            logger.info("ingest.invalid_message", error=exc.message)
            return IngestOutcome.PROCESSING_FAILED

        try:
            await self._process_message.run(ingested, self.stream_buffer)
            outcome = IngestOutcome.PROCESSED
        except (InsufficientHistoryError, ValidationError):
            outcome = IngestOutcome.PROCESSING_FAILED
        except Exception as exc:
            logger.error(
                "ingest.processing_error",
                series_id=ingested.series_id,
                error=str(exc),
                exc_info=exc,
            )
            outcome = IngestOutcome.PROCESSING_FAILED

        await self._publish_stream_prediction(ingested)
        return outcome

    async def _publish_stream_prediction(self, ingested: IngestedReading) -> None:
        if self._publisher is None:
            return

        points = self.stream_buffer.snapshot(ingested.series_id)
        try:
            prediction = self._spot_forecaster.predict(
                points, self._config.stream_horizon_minutes
            )
        except ValidationError as exc:
            logger.debug(
                "stream.prediction_skipped",
                series_id=ingested.series_id,
                reason=exc.message,
            )
            return

        try:
            await self._publisher.publish(
                self._config.stream_topic, stream_payload(ingested, prediction)
            )
        except Exception as exc:
            logger.warning(
                "stream.publish_failed", series_id=ingested.series_id, error=str(exc)
            )
            return
        self.counters["stream_published"] += 1
