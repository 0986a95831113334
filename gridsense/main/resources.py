"""
Resource bootstrap - Main Layer

Connects the optional collaborators at startup. Every connection failure
is logged and leaves the matching capability empty; only the history store
is always present, falling back to memory when Redis is unreachable.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

from pymongo.errors import PyMongoError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from gridsense.application.models import PipelineCapabilities
from gridsense.domain.entities.errors import TransportError
from gridsense.infrastructure.cache import RedisDecisionCache
from gridsense.infrastructure.database import MongoDatabase
from gridsense.infrastructure.gateways import RemotePredictionGateway
from gridsense.infrastructure.messaging import KafkaDecisionPublisher
from gridsense.infrastructure.repositories import (
    InMemoryHistoryStore,
    MongoDecisionRepository,
    MongoReadingArchive,
    RedisHistoryStore,
)
from gridsense.shared import get_logger

from .config import AppSettings

logger = get_logger(__name__)


@dataclass
class ConnectedResources:
    """Live clients and the capability set built on top of them."""

    capabilities: PipelineCapabilities
    mongo_database: Optional[MongoDatabase] = None
    redis_client: Optional[Redis] = None
    publisher: Optional[KafkaDecisionPublisher] = None

    @classmethod
    def offline(cls, max_points_per_series: int = 1000) -> "ConnectedResources":
        return cls(
            capabilities=PipelineCapabilities(
                history_store=InMemoryHistoryStore(max_points_per_series)
            )
        )

    async def close(self) -> None:
        if self.publisher is not None:
            await self.publisher.stop()
        if self.redis_client is not None:
            await self.redis_client.aclose()
        if self.mongo_database is not None:
            self.mongo_database.close()


async def _connect_redis(settings: AppSettings) -> Optional[Redis]:
    if not settings.redis.enabled:
        return None
    client = Redis.from_url(
        settings.redis.url, decode_responses=True, socket_connect_timeout=2.0
    )
    try:
        await client.ping()
    except (RedisError, OSError) as exc:
        logger.warning("resources.redis_unavailable", error=str(exc))
        await client.aclose()
        return None
    logger.info("resources.redis_connected")
    return client


async def _connect_mongo(settings: AppSettings) -> Optional[MongoDatabase]:
    if not settings.database.enabled:
        return None
    database = MongoDatabase(settings.database.mongo_uri, settings.database.database_name)
    try:
        await asyncio.to_thread(database.ping)
        await database.create_indexes()
    except PyMongoError as exc:
        logger.warning("resources.mongo_unavailable", error=str(exc))
        database.close()
        return None
    logger.info("resources.mongo_connected", database=settings.database.database_name)
    return database


async def _connect_publisher(settings: AppSettings) -> Optional[KafkaDecisionPublisher]:
    if not settings.kafka.enable_producer:
        return None
    publisher = KafkaDecisionPublisher(settings.kafka.bootstrap_servers)
    try:
        await publisher.start()
    except TransportError as exc:
        logger.warning("resources.kafka_unavailable", error=exc.message)
        return None
    return publisher


async def connect_resources(settings: AppSettings) -> ConnectedResources:
    redis_client = await _connect_redis(settings)
    mongo_database = await _connect_mongo(settings)
    publisher = await _connect_publisher(settings)

    if redis_client is not None:
        history_store = RedisHistoryStore(
            redis_client,
            ttl_seconds=settings.redis.ttl_timeseries,
            max_points_per_series=settings.redis.max_points_per_series,
        )
        decision_cache = RedisDecisionCache(
            redis_client, ttl_seconds=settings.redis.ttl_decisions
        )
    else:
        history_store = InMemoryHistoryStore(settings.redis.max_points_per_series)
        decision_cache = None

    remote_prediction = None
    if settings.prediction.remote_url:
        remote_prediction = RemotePredictionGateway(
            settings.prediction.remote_url, timeout=settings.prediction.timeout_seconds
        )

    capabilities = PipelineCapabilities(
        history_store=history_store,
        decision_cache=decision_cache,
        decision_store=(
            MongoDecisionRepository(mongo_database) if mongo_database else None
        ),
        reading_archive=MongoReadingArchive(mongo_database) if mongo_database else None,
        publisher=publisher,
        remote_prediction=remote_prediction,
    )
    logger.info(
        "resources.capabilities",
        history_store=type(history_store).__name__,
        cache=decision_cache is not None,
        decision_store=capabilities.decision_store is not None,
        publisher=publisher is not None,
        remote_prediction=remote_prediction is not None,
    )
    return ConnectedResources(
        capabilities=capabilities,
        mongo_database=mongo_database,
        redis_client=redis_client,
        publisher=publisher,
    )
