"""
Kafka Consumer - Infrastructure Layer

Feeds the raw values of the energy topic into an ingest coordinator. A
connection failure disables the coordinator's consumer instead of
crashing the host process.
"""

import asyncio
from typing import AsyncIterator, Optional

from aiokafka import AIOKafkaConsumer
from aiokafka.errors import KafkaError

from gridsense.application.services.ingest_coordinator import IngestCoordinator
from gridsense.domain.entities.errors import TransportError
from gridsense.shared.logging import get_logger

logger = get_logger(__name__)


class KafkaMessageConsumer:
    """Single consumption loop per running instance."""

    def __init__(
        self,
        coordinator: IngestCoordinator,
        bootstrap_servers: str,
        topic: str,
        group_id: str,
    ):
        self._coordinator = coordinator
        self._bootstrap_servers = bootstrap_servers
        self._topic = topic
        self._group_id = group_id
        self._consumer: Optional[AIOKafkaConsumer] = None

    async def start(self) -> None:
        """
        Connect and subscribe.

        Raises:
            TransportError: If the brokers cannot be reached.
        """
        consumer = AIOKafkaConsumer(
            self._topic,
            bootstrap_servers=self._bootstrap_servers,
            group_id=self._group_id,
            auto_offset_reset="latest",
            enable_auto_commit=True,
        )
        try:
            await consumer.start()
        except (KafkaError, OSError) as exc:
            await consumer.stop()
            raise TransportError(
                f"Kafka consumer could not connect: {exc}",
                details={"topic": self._topic},
            ) from exc
        self._consumer = consumer
        logger.info(
            "kafka.consumer_started", topic=self._topic, group_id=self._group_id
        )

    async def run(self) -> None:
        """Consume until cancelled; degrade to disabled on transport failure."""
        try:
            await self.start()
        except TransportError as exc:
            self._coordinator.disable(exc.message)
            return

        try:
            await self._coordinator.run(self._values())
        except asyncio.CancelledError:
            logger.info("kafka.consumer_cancelled")
            raise
        except KafkaError as exc:
            self._coordinator.disable(f"Kafka consumer failed: {exc}")
        finally:
            await self.stop()

    async def _values(self) -> AsyncIterator[Optional[bytes]]:
        async for message in self._consumer:
            yield message.value

    async def stop(self) -> None:
        if self._consumer is None:
            return
        consumer, self._consumer = self._consumer, None
        await consumer.stop()
        logger.info("kafka.consumer_stopped")
