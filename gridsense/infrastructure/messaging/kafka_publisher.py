"""
Kafka Publisher - Infrastructure Layer

JSON producer used for processed decisions and streaming predictions.
"""

import json
from typing import Any, Dict, Optional

from aiokafka import AIOKafkaProducer
from aiokafka.errors import KafkaError

from gridsense.domain.entities.errors import DependencyError, TransportError
from gridsense.shared.logging import get_logger

logger = get_logger(__name__)


def _serialize(value: Dict[str, Any]) -> bytes:
    return json.dumps(value, default=str).encode("utf-8")


class KafkaDecisionPublisher:
    """aiokafka producer wrapper implementing the decision publisher port."""

    def __init__(self, bootstrap_servers: str, client_id: str = "gridsense"):
        self._bootstrap_servers = bootstrap_servers
        self._client_id = client_id
        self._producer: Optional[AIOKafkaProducer] = None

    @property
    def is_running(self) -> bool:
        return self._producer is not None

    @property
    def bootstrap_servers(self) -> str:
        return self._bootstrap_servers

    async def start(self) -> None:
        """
        Connect the producer.

        Raises:
            TransportError: If the brokers cannot be reached.
        """
        producer = AIOKafkaProducer(
            bootstrap_servers=self._bootstrap_servers,
            client_id=self._client_id,
            value_serializer=_serialize,
        )
        try:
            await producer.start()
        except (KafkaError, OSError) as exc:
            await producer.stop()
            raise TransportError(
                f"Kafka producer could not connect: {exc}",
                details={"bootstrap_servers": self._bootstrap_servers},
            ) from exc
        self._producer = producer
        logger.info("kafka.producer_started", bootstrap_servers=self._bootstrap_servers)

    async def publish(self, topic: str, payload: Dict[str, Any]) -> None:
        if self._producer is None:
            raise DependencyError("Kafka producer is not running")
        try:
            await self._producer.send_and_wait(topic, payload)
        except KafkaError as exc:
            raise DependencyError(
                f"Kafka publish failed: {exc}", details={"topic": topic}
            ) from exc

    async def stop(self) -> None:
        if self._producer is None:
            return
        producer, self._producer = self._producer, None
        await producer.stop()
        logger.info("kafka.producer_stopped")
