"""Fan-out of a decision to the cache, the durable store and the bus."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Dict, Optional

from gridsense.domain.entities.decision import Decision
from gridsense.domain.ports.decision_sinks import IDecisionCache, IDecisionPublisher
from gridsense.domain.repositories.decision_repository import IDecisionRepository
from gridsense.shared.logging import get_logger

logger = get_logger(__name__)


def decision_cache_key(series_id: str, decision: Decision) -> str:
    return f"decisions:{series_id}:{decision.timestamp.isoformat()}"


class ResultSink:
    """
    Writes a decision to every configured target.

    The writes run concurrently and each failure is caught and logged on its
    own, so one unavailable target never hides the others. Nothing is
    retried here and nothing is raised to the caller.
    """

    def __init__(
        self,
        cache: Optional[IDecisionCache] = None,
        decision_store: Optional[IDecisionRepository] = None,
        publisher: Optional[IDecisionPublisher] = None,
        topic: str = "energy-processed",
    ) -> None:
        self._cache = cache
        self._decision_store = decision_store
        self._publisher = publisher
        self._topic = topic

    async def emit(self, series_id: str, decision: Decision) -> Dict[str, bool]:
        """Run all writes and report which targets accepted the decision."""
        payload = decision.to_payload()
        writes: Dict[str, Awaitable[Any]] = {}
        if self._cache is not None:
            writes["cache"] = self._cache.upsert(
                decision_cache_key(series_id, decision), payload
            )
        if self._decision_store is not None:
            writes["store"] = self._decision_store.insert(series_id, decision)
        if self._publisher is not None:
            writes["bus"] = self._publisher.publish(self._topic, payload)

        if not writes:
            return {}

        outcomes = await asyncio.gather(
            *(self._guard(name, series_id, write) for name, write in writes.items())
        )
        return dict(zip(writes.keys(), outcomes))

    async def _guard(self, name: str, series_id: str, write: Awaitable[Any]) -> bool:
        try:
            await write
        except Exception as exc:
            logger.warning(
                f"sink.{name}_write_failed", series_id=series_id, error=str(exc)
            )
            return False
        return True
