from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
from aiokafka.errors import KafkaConnectionError, KafkaError

from gridsense.domain.entities.errors import DependencyError, TransportError
from gridsense.infrastructure.messaging import kafka_publisher
from gridsense.infrastructure.messaging.kafka_publisher import KafkaDecisionPublisher


class _StubProducer:
    instances: List["_StubProducer"] = []
    fail_start: Optional[Exception] = None
    fail_send: Optional[Exception] = None

    def __init__(self, **options: Any) -> None:
        self.options = options
        self.sent: List[tuple] = []
        self.started = False
        self.stopped = False
        _StubProducer.instances.append(self)

    async def start(self) -> None:
        if self.fail_start is not None:
            raise self.fail_start
        self.started = True

    async def send_and_wait(self, topic: str, value: Dict[str, Any]) -> None:
        if self.fail_send is not None:
            raise self.fail_send
        self.sent.append((topic, self.options["value_serializer"](value)))

    async def stop(self) -> None:
        self.stopped = True


@pytest.fixture(autouse=True)
def patch_producer(monkeypatch) -> None:
    _StubProducer.instances = []
    _StubProducer.fail_start = None
    _StubProducer.fail_send = None
    monkeypatch.setattr(kafka_publisher, "AIOKafkaProducer", _StubProducer)


@pytest.mark.asyncio
async def test_publish_serializes_json() -> None:
    publisher = KafkaDecisionPublisher("kafka:9092", client_id="test")
    await publisher.start()

    await publisher.publish("energy-processed", {"actionType": "CRITICAL_NOW"})

    producer = _StubProducer.instances[0]
    assert publisher.is_running is True
    assert producer.options["bootstrap_servers"] == "kafka:9092"
    assert producer.sent == [("energy-processed", b'{"actionType": "CRITICAL_NOW"}')]

    await publisher.stop()
    assert producer.stopped is True
    assert publisher.is_running is False


@pytest.mark.asyncio
async def test_start_failure_raises_transport_error() -> None:
    _StubProducer.fail_start = KafkaConnectionError("unreachable")
    publisher = KafkaDecisionPublisher("kafka:9092")

    with pytest.raises(TransportError):
        await publisher.start()

    assert publisher.is_running is False
    assert _StubProducer.instances[0].stopped is True


@pytest.mark.asyncio
async def test_publish_requires_running_producer() -> None:
    with pytest.raises(DependencyError):
        await KafkaDecisionPublisher("kafka:9092").publish("topic", {})


@pytest.mark.asyncio
async def test_publish_failure_raises_dependency_error() -> None:
    publisher = KafkaDecisionPublisher("kafka:9092")
    await publisher.start()
    _StubProducer.fail_send = KafkaError("broker gone")

    with pytest.raises(DependencyError):
        await publisher.publish("topic", {"a": 1})
