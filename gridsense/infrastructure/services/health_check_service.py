"""Infrastructure implementation for system health checks."""

from __future__ import annotations

import asyncio
from time import perf_counter
from typing import Iterable, List, Optional

from redis.asyncio import Redis

from gridsense.domain.entities.health import DependencyStatus, ServiceStatus, SystemHealth
from gridsense.domain.ports.health_check import IHealthCheckService
from gridsense.infrastructure.database.mongo_database import MongoDatabase
from gridsense.infrastructure.messaging.kafka_publisher import KafkaDecisionPublisher


class HealthCheckService(IHealthCheckService):
    """Collect health information for the store, cache and bus."""

    def __init__(
        self,
        mongo_database: Optional[MongoDatabase],
        redis_client: Optional[Redis],
        publisher: Optional[KafkaDecisionPublisher],
        *,
        mongo_enabled: bool = True,
        redis_enabled: bool = True,
        kafka_enabled: bool = True,
    ) -> None:
        self._mongo_database = mongo_database
        self._redis_client = redis_client
        self._publisher = publisher
        self._mongo_enabled = mongo_enabled
        self._redis_enabled = redis_enabled
        self._kafka_enabled = kafka_enabled

    async def evaluate(self) -> SystemHealth:
        """Run checks concurrently and aggregate system health."""

        checks = {
            "mongo": asyncio.create_task(self._check_mongo()),
            "redis": asyncio.create_task(self._check_redis()),
            "kafka": asyncio.create_task(self._check_kafka()),
        }

        dependency_statuses: List[DependencyStatus] = []

        for name, task in checks.items():
            try:
                dependency_statuses.append(await task)
            except Exception as exc:  # pragma: no cover
                dependency_statuses.append(
                    DependencyStatus(
                        name=name,
                        status=ServiceStatus.DOWN,
                        message=str(exc),
                    )
                )

        overall_status = self._aggregate_status(dependency_statuses)
        return SystemHealth(status=overall_status, dependencies=dependency_statuses)

    def _aggregate_status(self, statuses: Iterable[DependencyStatus]) -> ServiceStatus:
        has_unknown = False
        has_degraded = False

        for status in statuses:
            if status.status == ServiceStatus.DOWN:
                return ServiceStatus.DOWN
            if status.status == ServiceStatus.DEGRADED:
                has_degraded = True
            if status.status == ServiceStatus.UNKNOWN:
                has_unknown = True

        if has_degraded:
            return ServiceStatus.DEGRADED
        if has_unknown:
            return ServiceStatus.UNKNOWN
        return ServiceStatus.UP

    async def _check_mongo(self) -> DependencyStatus:
        if not self._mongo_enabled:
            return DependencyStatus(
                name="mongo",
                status=ServiceStatus.UNKNOWN,
                message="MongoDB disabled by configuration.",
            )
        if self._mongo_database is None:
            return DependencyStatus(
                name="mongo",
                status=ServiceStatus.DEGRADED,
                message="MongoDB unavailable; decisions and readings are not archived.",
            )

        start = perf_counter()
        try:
            await asyncio.to_thread(self._mongo_database.ping)
            latency_ms = (perf_counter() - start) * 1000
            return DependencyStatus(
                name="mongo",
                status=ServiceStatus.UP,
                message="MongoDB ping successful",
                latency_ms=latency_ms,
                details={"database": self._mongo_database.db.name},
            )
        except Exception as exc:
            latency_ms = (perf_counter() - start) * 1000
            return DependencyStatus(
                name="mongo",
                status=ServiceStatus.DOWN,
                message=f"MongoDB ping failed: {exc}",
                latency_ms=latency_ms,
            )

    async def _check_redis(self) -> DependencyStatus:
        if not self._redis_enabled:
            return DependencyStatus(
                name="redis",
                status=ServiceStatus.UNKNOWN,
                message="Redis disabled by configuration; using in-memory history.",
            )
        if self._redis_client is None:
            return DependencyStatus(
                name="redis",
                status=ServiceStatus.DEGRADED,
                message="Redis unavailable; using in-memory history.",
            )

        start = perf_counter()
        try:
            await self._redis_client.ping()
            latency_ms = (perf_counter() - start) * 1000
            return DependencyStatus(
                name="redis",
                status=ServiceStatus.UP,
                message="Redis ping successful",
                latency_ms=latency_ms,
            )
        except Exception as exc:
            latency_ms = (perf_counter() - start) * 1000
            return DependencyStatus(
                name="redis",
                status=ServiceStatus.DOWN,
                message=f"Redis ping failed: {exc}",
                latency_ms=latency_ms,
            )

    async def _check_kafka(self) -> DependencyStatus:
        if not self._kafka_enabled:
            return DependencyStatus(
                name="kafka",
                status=ServiceStatus.UNKNOWN,
                message="Kafka producer disabled by configuration.",
            )
        if self._publisher is None or not self._publisher.is_running:
            return DependencyStatus(
                name="kafka",
                status=ServiceStatus.DEGRADED,
                message="Kafka producer not connected; decisions are not published.",
            )
        return DependencyStatus(
            name="kafka",
            status=ServiceStatus.UP,
            message="Kafka producer connected",
            details={"bootstrap_servers": self._publisher.bootstrap_servers},
        )
