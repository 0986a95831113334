"""
Redis History Store - Infrastructure Layer

Each series keeps a sorted-set timeline (``timeline:{id}``, score = epoch
seconds, member = ISO timestamp) and one JSON key per point
(``timeseries:{id}:{iso}``). Point keys expire after the configured TTL;
the timeline is trimmed to the newest ``max_points_per_series`` members.
"""

import json
from datetime import datetime
from typing import List, Optional, Sequence

from redis.asyncio import Redis

from gridsense.domain.entities.reading import HistoryPoint, Reading
from gridsense.domain.repositories.history_store import IHistoryStore
from gridsense.domain.services.normalizer import parse_timestamp
from gridsense.shared.logging import get_logger

logger = get_logger(__name__)


def timeline_key(series_id: str) -> str:
    return f"timeline:{series_id}"


def point_key(series_id: str, iso_timestamp: str) -> str:
    return f"timeseries:{series_id}:{iso_timestamp}"


class RedisHistoryStore(IHistoryStore):
    """Redis implementation of the history store."""

    def __init__(
        self,
        client: Redis,
        ttl_seconds: int = 3600,
        max_points_per_series: int = 1000,
    ):
        self._client = client
        self._ttl_seconds = ttl_seconds
        self._max_points = max(1, max_points_per_series)

    async def append(self, series_id: str, reading: Reading) -> bool:
        iso = reading.timestamp.isoformat()
        body = json.dumps(
            {
                "timestamp": iso,
                "price": reading.price,
                "area": reading.area,
                "customer": reading.customer,
                "series_id": series_id,
            }
        )
        timeline = timeline_key(series_id)
        try:
            async with self._client.pipeline(transaction=False) as pipe:
                pipe.set(point_key(series_id, iso), body, ex=self._ttl_seconds)
                pipe.zadd(timeline, {iso: reading.timestamp.timestamp()})
                pipe.zremrangebyrank(timeline, 0, -(self._max_points + 1))
                pipe.expire(timeline, self._ttl_seconds)
                await pipe.execute()
        except Exception as exc:
            logger.warning("history.redis_append_failed", series_id=series_id, error=str(exc))
            return False
        return True

    async def fetch_window(self, series_id: str, max_points: int) -> List[HistoryPoint]:
        if max_points <= 0:
            return []
        members = await self._client.zrange(timeline_key(series_id), -max_points, -1)
        return await self._load_points(series_id, members)

    async def fetch_range(
        self, series_id: str, start: datetime, end: datetime, limit: int
    ) -> List[HistoryPoint]:
        if limit <= 0:
            return []
        members = await self._client.zrevrangebyscore(
            timeline_key(series_id),
            end.timestamp(),
            start.timestamp(),
            start=0,
            num=limit,
        )
        return await self._load_points(series_id, list(reversed(members)))

    async def _load_points(
        self, series_id: str, members: Sequence[str]
    ) -> List[HistoryPoint]:
        if not members:
            return []
        raw_values = await self._client.mget(
            [point_key(series_id, _text(member)) for member in members]
        )
        points: List[HistoryPoint] = []
        for raw in raw_values:
            point = _decode_point(raw)
            if point is not None:
                points.append(point)
        return points


def _text(value) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else value


def _decode_point(raw) -> Optional[HistoryPoint]:
    # Point keys expire independently of the timeline.
    if raw is None:
        return None
    try:
        document = json.loads(_text(raw))
        timestamp = parse_timestamp(document.get("timestamp"))
        price = float(document["price"])
    except (ValueError, TypeError, KeyError, AttributeError):
        return None
    if timestamp is None:
        return None
    return HistoryPoint(timestamp=timestamp, price=price)
