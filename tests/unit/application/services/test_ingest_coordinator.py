from __future__ import annotations

import json
from datetime import timedelta

import pytest

from gridsense.application.models import (
    PipelineCapabilities,
    PipelineConfig,
    StreamConfig,
)
from gridsense.application.services.ingest_coordinator import (
    IngestCoordinator,
    parse_body,
)
from gridsense.application.services.result_sink import ResultSink
from gridsense.application.use_cases.process_message_use_case import (
    ProcessMessageUseCase,
)
from gridsense.domain.entities.ingest import IngestOutcome
from gridsense.domain.services.decision_engine import DecisionEngine
from gridsense.domain.services.forecaster import TrendForecaster
from gridsense.domain.services.spot_forecaster import SpotPriceForecaster
from gridsense.infrastructure.repositories.memory_history_store import (
    InMemoryHistoryStore,
)
from tests.conftest import BASE_TIME, StubPublisher


class _ExplodingHistoryStore(InMemoryHistoryStore):
    async def append(self, series_id, reading):
        raise RuntimeError("unexpected")


def _coordinator(
    min_history_points: int = 1,
    publisher=None,
    history_store=None,
    clock=lambda: 0.0,
    **stream_options,
) -> IngestCoordinator:
    process_message = ProcessMessageUseCase(
        capabilities=PipelineCapabilities(
            history_store=history_store or InMemoryHistoryStore()
        ),
        result_sink=ResultSink(),
        forecaster=TrendForecaster(),
        decision_engine=DecisionEngine(),
        config=PipelineConfig(min_history_points=min_history_points),
    )
    return IngestCoordinator(
        process_message=process_message,
        spot_forecaster=SpotPriceForecaster(min_points=3),
        config=StreamConfig(**stream_options),
        publisher=publisher,
        clock=clock,
    )


def _message(price: float, hour: int = 0, meter: str = "m-1") -> dict:
    return {
        "DateTime": (BASE_TIME + timedelta(hours=hour)).isoformat(),
        "Price": price,
        "meter_id": meter,
    }


def test_parse_body_variants() -> None:
    assert parse_body({"Price": 1}) == {"Price": 1}
    assert parse_body(b'{"Price": 1}') == {"Price": 1}
    assert parse_body('{"Price": 1}') == {"Price": 1}
    assert parse_body("[1, 2]") is None
    assert parse_body(b"\xff") is None
    assert parse_body("not json") is None
    assert parse_body(42) is None


@pytest.mark.asyncio
async def test_consume_rejects_unparseable_bodies() -> None:
    coordinator = _coordinator()

    assert await coordinator.consume(b"{broken") is None
    assert coordinator.stats() == {"received": 1, "rejected": 1}


@pytest.mark.asyncio
async def test_consume_applies_rate_window() -> None:
    coordinator = _coordinator(max_messages_per_second=2)

    outcomes = [await coordinator.consume(_message(30, hour)) for hour in range(3)]

    assert outcomes == [
        IngestOutcome.PROCESSED,
        IngestOutcome.PROCESSED,
        IngestOutcome.RATE_LIMITED,
    ]
    assert coordinator.counters["rate-limited"] == 1


@pytest.mark.asyncio
async def test_consume_samples_admitted_messages() -> None:
    coordinator = _coordinator(process_every_n=2)

    outcomes = [await coordinator.consume(_message(30, hour)) for hour in range(4)]

    assert outcomes == [
        IngestOutcome.PROCESSED,
        IngestOutcome.SAMPLED_OUT,
        IngestOutcome.PROCESSED,
        IngestOutcome.SAMPLED_OUT,
    ]


@pytest.mark.asyncio
async def test_consume_reports_processing_failures() -> None:
    coordinator = _coordinator(min_history_points=12)

    invalid = await coordinator.consume({"DateTime": "2025-03-02T00:00:00Z"})
    short = await coordinator.consume(json.dumps(_message(30)))

    assert invalid is IngestOutcome.PROCESSING_FAILED
    assert short is IngestOutcome.PROCESSING_FAILED
    assert coordinator.counters["processing-failed"] == 2
    assert "m-1" in coordinator.stream_buffer


@pytest.mark.asyncio
async def test_consume_survives_unexpected_errors() -> None:
    coordinator = _coordinator(history_store=_ExplodingHistoryStore())

    assert await coordinator.consume(_message(30)) is IngestOutcome.PROCESSING_FAILED


@pytest.mark.asyncio
async def test_stream_predictions_are_published_once_buffer_is_warm() -> None:
    publisher = StubPublisher()
    coordinator = _coordinator(
        min_history_points=12, publisher=publisher, stream_topic="stream"
    )

    for hour, price in enumerate([10, 11, 12, 13]):
        await coordinator.consume(_message(price, hour))

    published = publisher.on("stream")
    assert len(published) == 2
    assert published[-1]["series_id"] == "m-1"
    assert published[-1]["predicted_price"] == pytest.approx(14.0)
    assert published[-1]["predicted_price_next_minutes"] == 60.0
    assert published[-1]["meta"]["supporting_points"] == 4
    assert published[-1]["recommendation"]["action"] == "reduce_now"
    assert coordinator.counters["stream_published"] == 2


@pytest.mark.asyncio
async def test_stream_publish_failures_are_not_fatal() -> None:
    coordinator = _coordinator(publisher=StubPublisher(fail=True))

    for hour in range(4):
        assert await coordinator.consume(_message(20 + hour, hour)) is (
            IngestOutcome.PROCESSED
        )
    assert coordinator.counters["stream_published"] == 0


@pytest.mark.asyncio
async def test_run_drains_message_source() -> None:
    coordinator = _coordinator()

    async def messages():
        assert coordinator.consumer_running is True
        for hour in range(3):
            yield json.dumps(_message(30, hour)).encode()

    await coordinator.run(messages())

    assert coordinator.consumer_running is False
    assert coordinator.counters["processed"] == 3


def test_disable_records_reason() -> None:
    coordinator = _coordinator()

    coordinator.disable("broker unreachable")

    assert coordinator.disabled_reason == "broker unreachable"
    assert coordinator.consumer_running is False
