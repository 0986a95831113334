"""Use case running one inbound record through forecast and decision."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from gridsense.application.models import (
    IngestedReading,
    PipelineCapabilities,
    PipelineConfig,
    PipelineResult,
)
from gridsense.application.services.result_sink import ResultSink
from gridsense.domain.entities.errors import InsufficientHistoryError
from gridsense.domain.entities.reading import HistoryPoint
from gridsense.domain.services.decision_engine import DecisionEngine
from gridsense.domain.services.forecaster import TrendForecaster
from gridsense.domain.services.normalizer import MessageNormalizer
from gridsense.domain.services.series_resolver import SeriesResolver
from gridsense.domain.services.stream_buffer import StreamBuffer
from gridsense.shared.logging import get_logger

logger = get_logger(__name__)


class ProcessMessageUseCase:
    """Normalize, persist, forecast, decide and fan out a single record."""

    def __init__(
        self,
        capabilities: PipelineCapabilities,
        result_sink: ResultSink,
        forecaster: TrendForecaster,
        decision_engine: DecisionEngine,
        config: PipelineConfig,
        normalizer: Optional[MessageNormalizer] = None,
        resolver: Optional[SeriesResolver] = None,
    ) -> None:
        self._capabilities = capabilities
        self._result_sink = result_sink
        self._forecaster = forecaster
        self._decision_engine = decision_engine
        self._config = config
        self._normalizer = normalizer or MessageNormalizer()
        self._resolver = resolver or SeriesResolver()

    def prepare(self, payload: Mapping[str, Any]) -> IngestedReading:
        """
        Normalize the record and resolve its series.

        Raises:
            ValidationError: If the record has no usable price.
        """
        reading = self._normalizer.normalize(payload)
        return IngestedReading(series_id=self._resolver.resolve(reading), reading=reading)

    async def execute(self, payload: Mapping[str, Any]) -> PipelineResult:
        return await self.run(self.prepare(payload))

    async def run(
        self,
        ingested: IngestedReading,
        stream_buffer: Optional[StreamBuffer] = None,
    ) -> PipelineResult:
        """
        Run the pipeline for an already normalized reading.

        Raises:
            InsufficientHistoryError: If the series window is shorter than the
                configured minimum. No decision is produced in that case.
        """
        series_id, reading = ingested.series_id, ingested.reading
        point = HistoryPoint(timestamp=reading.timestamp, price=reading.price)

        if stream_buffer is not None:
            stream_buffer.append(series_id, point)

        await self._archive(series_id, ingested)

        history_store = self._capabilities.history_store
        try:
            appended = await history_store.append(series_id, reading)
        except Exception as exc:
            logger.warning("history.append_failed", series_id=series_id, error=str(exc))
            appended = False
        else:
            if not appended:
                logger.warning("history.append_failed", series_id=series_id)

        window = await self._load_window(series_id)
        if not appended or window is None:
            window = ((window or []) + [point])[-self._config.history_lookback_points :]

        if len(window) < self._config.min_history_points:
            logger.info(
                "pipeline.insufficient_history",
                series_id=series_id,
                required=self._config.min_history_points,
                available=len(window),
            )
            raise InsufficientHistoryError(
                series_id, self._config.min_history_points, len(window)
            )

        forecast = self._forecaster.predict(window, self._config.horizon_points)
        decision = self._decision_engine.decide(reading, forecast)
        writes = await self._result_sink.emit(series_id, decision)

        logger.info(
            "pipeline.decision",
            series_id=series_id,
            action=decision.action_type.value,
            price=reading.price,
            confidence=decision.confidence_score,
        )
        return PipelineResult(
            series_id=series_id,
            reading=reading,
            forecast=forecast,
            decision=decision,
            writes=writes,
        )

    async def _archive(self, series_id: str, ingested: IngestedReading) -> None:
        archive = self._capabilities.reading_archive
        if archive is None:
            return
        try:
            await archive.store(series_id, ingested.reading)
        except Exception as exc:
            logger.warning("archive.store_failed", series_id=series_id, error=str(exc))

    async def _load_window(self, series_id: str) -> Optional[List[HistoryPoint]]:
        try:
            return list(
                await self._capabilities.history_store.fetch_window(
                    series_id, self._config.history_lookback_points
                )
            )
        except Exception as exc:
            logger.warning("history.fetch_failed", series_id=series_id, error=str(exc))
            return None
