"""Redis cache of the latest decision payloads."""

import json
from typing import Any, Dict

from redis.asyncio import Redis


class RedisDecisionCache:
    """Stores each decision payload as JSON under its key with a TTL."""

    def __init__(self, client: Redis, ttl_seconds: int = 86400):
        self._client = client
        self._ttl_seconds = ttl_seconds

    async def upsert(self, key: str, payload: Dict[str, Any]) -> None:
        await self._client.set(key, json.dumps(payload), ex=self._ttl_seconds)
