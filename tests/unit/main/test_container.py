from __future__ import annotations

import asyncio

import pytest

from gridsense.application.services.ingest_coordinator import IngestCoordinator
from gridsense.application.use_cases.process_message_use_case import (
    ProcessMessageUseCase,
)
from gridsense.infrastructure.repositories.memory_history_store import (
    InMemoryHistoryStore,
)
from gridsense.main.config import AppSettings
from gridsense.main.container import app_lifespan, get_container, init_container
from gridsense.main.resources import ConnectedResources


class _TrackedResources(ConnectedResources):
    closed: bool = False

    async def close(self) -> None:
        self.closed = True


@pytest.fixture()
def tracked_resources(monkeypatch) -> _TrackedResources:
    resources = _TrackedResources(
        capabilities=ConnectedResources.offline().capabilities
    )

    async def _connect(settings):
        return resources

    monkeypatch.setattr("gridsense.main.container.connect_resources", _connect)
    return resources


def test_init_and_get_container() -> None:
    container = init_container(AppSettings())

    assert get_container() is container
    assert isinstance(container.process_message_use_case(), ProcessMessageUseCase)
    assert isinstance(container.capabilities().history_store, InMemoryHistoryStore)
    assert container.decision_engine().price_threshold == 80.0
    assert container.decision_engine().offpeak_hours == [(0, 6), (22, 23)]
    assert container.ingest_coordinator() is container.ingest_coordinator()


@pytest.mark.asyncio
async def test_app_lifespan_swaps_and_closes_resources(tracked_resources) -> None:
    container = init_container(AppSettings())
    before = container.ingest_coordinator()

    async with app_lifespan(AppSettings(), start_consumer=False):
        assert container.resources() is tracked_resources
        assert container.ingest_coordinator() is not before

    assert tracked_resources.closed is True
    assert container.resources() is not tracked_resources


@pytest.mark.asyncio
async def test_app_lifespan_cancels_consumer_task(tracked_resources, monkeypatch) -> None:
    init_container(AppSettings())
    started = asyncio.Event()
    cancelled = []

    class _BlockingConsumer:
        async def run(self) -> None:
            started.set()
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.append(True)
                raise

    monkeypatch.setattr(
        "gridsense.main.container.build_consumer",
        lambda container, settings: _BlockingConsumer(),
    )

    async with app_lifespan(AppSettings(), start_consumer=True) as container:
        await asyncio.wait_for(started.wait(), timeout=1)
        assert isinstance(container.ingest_coordinator(), IngestCoordinator)

    assert cancelled == [True]


def test_decision_engine_parses_configured_offpeak_hours(monkeypatch) -> None:
    monkeypatch.setenv("DECISION_OFFPEAK_HOURS", "1-4,bad,23")

    container = init_container(AppSettings())

    assert container.decision_engine().offpeak_hours == [(1, 4), (23, 23)]


def test_get_container_without_init_raises(monkeypatch) -> None:
    monkeypatch.setattr("gridsense.main.container._app_container", None)
    with pytest.raises(RuntimeError):
        get_container()
