from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import pytest

from gridsense.domain.entities.decision import Decision
from gridsense.domain.entities.reading import HistoryPoint, Reading

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

BASE_TIME = datetime(2025, 3, 2, 0, 0, tzinfo=timezone.utc)


def make_points(
    prices: Sequence[float],
    start: datetime = BASE_TIME,
    step: timedelta = timedelta(hours=1),
) -> List[HistoryPoint]:
    return [
        HistoryPoint(timestamp=start + step * index, price=float(price))
        for index, price in enumerate(prices)
    ]


def make_records(
    prices: Sequence[float],
    start: datetime = BASE_TIME,
    step: timedelta = timedelta(hours=1),
    area: str = "NO1",
) -> List[Dict[str, Any]]:
    return [
        {
            "DateTime": (start + step * index).isoformat(),
            "Price": price,
            "AREA": area,
        }
        for index, price in enumerate(prices)
    ]


def make_reading(
    price: float,
    timestamp: datetime = BASE_TIME,
    area: str = "NO1",
    customer: str = "c-1",
    **raw: Any,
) -> Reading:
    return Reading(
        timestamp=timestamp,
        price=price,
        area=area,
        customer=customer,
        raw_payload=raw,
    )


class FakeCursor:
    def __init__(self, documents: Sequence[Dict[str, Any]]):
        self._documents = list(documents)
        self._limit: Optional[int] = None

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._documents.sort(key=lambda doc: doc.get(key), reverse=direction < 0)
        return self

    def limit(self, amount: int) -> "FakeCursor":
        self._limit = amount
        return self

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        docs = self._documents
        if self._limit is not None:
            docs = docs[: self._limit]
        return iter(docs)


class FakeCollection:
    def __init__(self) -> None:
        self.documents: List[Dict[str, Any]] = []
        self.created_indexes: List[Tuple[Any, ...]] = []
        self.fail_inserts = False

    @staticmethod
    def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
        return all(document.get(key) == value for key, value in query.items())

    def find(self, query: Dict[str, Any]) -> FakeCursor:
        return FakeCursor(
            [doc for doc in self.documents if self._matches(doc, query)]
        )

    def insert_one(self, document: Dict[str, Any]) -> Any:
        if self.fail_inserts:
            raise RuntimeError("insert failed")
        self.documents.append(document)
        return SimpleNamespace(acknowledged=True, inserted_id=len(self.documents))

    def create_index(self, keys: Any, **kwargs: Any) -> str:
        self.created_indexes.append((keys, kwargs))
        return kwargs.get("name", "idx")


class FakeMongoDatabase:
    """Stands in for MongoDatabase with in-memory collections."""

    def __init__(self) -> None:
        self.collections: Dict[str, FakeCollection] = {}
        self.db = SimpleNamespace(name="gridsense_test")

    def collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())

    async def find_many(
        self,
        collection_name: str,
        query: Dict[str, Any],
        sort_by: Optional[str] = None,
        sort_direction: int = 1,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        cursor = self.collection(collection_name).find(query)
        if sort_by:
            cursor = cursor.sort(sort_by, sort_direction)
        return list(cursor.limit(limit))

    async def insert_one(self, collection_name: str, document: Dict[str, Any]):
        self.collection(collection_name).insert_one(document)
        return document

    def ping(self) -> None:
        return None


class FakeRedis:
    """In-memory subset of the redis.asyncio API used by the adapters."""

    def __init__(self) -> None:
        self.values: Dict[str, str] = {}
        self.expirations: Dict[str, int] = {}
        self.sorted_sets: Dict[str, Dict[str, float]] = {}
        self.fail = False
        self.closed = False

    def _check(self) -> None:
        if self.fail:
            raise ConnectionError("redis down")

    async def ping(self) -> bool:
        self._check()
        return True

    async def set(self, key: str, value: str, ex: Optional[int] = None) -> bool:
        self._check()
        self.values[key] = value
        if ex is not None:
            self.expirations[key] = ex
        return True

    async def get(self, key: str) -> Optional[str]:
        self._check()
        return self.values.get(key)

    async def mget(self, keys: Sequence[str]) -> List[Optional[str]]:
        self._check()
        return [self.values.get(key) for key in keys]

    async def zadd(self, key: str, mapping: Dict[str, float]) -> int:
        self._check()
        self.sorted_sets.setdefault(key, {}).update(mapping)
        return len(mapping)

    def _ordered(self, key: str) -> List[str]:
        members = self.sorted_sets.get(key, {})
        return [
            member
            for member, _ in sorted(members.items(), key=lambda item: (item[1], item[0]))
        ]

    async def zrange(self, key: str, start: int, end: int) -> List[str]:
        self._check()
        ordered = self._ordered(key)
        size = len(ordered)
        start = max(0, size + start) if start < 0 else start
        end = size + end if end < 0 else end
        if end < start:
            return []
        return ordered[start : end + 1]

    async def zrevrangebyscore(
        self,
        key: str,
        max: float,
        min: float,
        start: Optional[int] = None,
        num: Optional[int] = None,
    ) -> List[str]:
        self._check()
        scores = self.sorted_sets.get(key, {})
        matching = [
            member for member in reversed(self._ordered(key)) if min <= scores[member] <= max
        ]
        offset = start or 0
        return matching[offset : offset + num] if num is not None else matching[offset:]

    async def zremrangebyrank(self, key: str, start: int, end: int) -> int:
        self._check()
        ordered = self._ordered(key)
        size = len(ordered)
        start = max(0, size + start) if start < 0 else start
        end = size + end if end < 0 else end
        if end < start:
            return 0
        removed = ordered[start : end + 1]
        for member in removed:
            del self.sorted_sets[key][member]
        return len(removed)

    async def expire(self, key: str, seconds: int) -> bool:
        self._check()
        self.expirations[key] = seconds
        return True

    def pipeline(self, transaction: bool = True) -> "FakePipeline":
        return FakePipeline(self)

    async def aclose(self) -> None:
        self.closed = True


class FakePipeline:
    def __init__(self, redis: FakeRedis) -> None:
        self._redis = redis
        self._commands: List[Tuple[str, tuple, dict]] = []

    async def __aenter__(self) -> "FakePipeline":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    def __getattr__(self, name: str):
        def _queue(*args: Any, **kwargs: Any) -> "FakePipeline":
            self._commands.append((name, args, kwargs))
            return self

        return _queue

    async def execute(self) -> List[Any]:
        results = []
        for name, args, kwargs in self._commands:
            results.append(await getattr(self._redis, name)(*args, **kwargs))
        self._commands = []
        return results


class StubCache:
    def __init__(self, fail: bool = False) -> None:
        self.entries: Dict[str, Dict[str, Any]] = {}
        self.fail = fail

    async def upsert(self, key: str, payload: Dict[str, Any]) -> None:
        if self.fail:
            raise ConnectionError("cache down")
        self.entries[key] = payload


class StubDecisionStore:
    def __init__(self, fail: bool = False) -> None:
        self.rows: List[Tuple[str, Decision]] = []
        self.fail = fail

    async def insert(self, series_id: str, decision: Decision) -> None:
        if self.fail:
            raise ConnectionError("store down")
        self.rows.append((series_id, decision))

    async def find_latest(self, series_id: str) -> Optional[Dict[str, Any]]:
        for stored_series, decision in reversed(self.rows):
            if stored_series == series_id:
                document = decision.to_payload()
                document["seriesId"] = series_id
                return document
        return None


class StubPublisher:
    def __init__(self, fail: bool = False) -> None:
        self.messages: List[Tuple[str, Dict[str, Any]]] = []
        self.fail = fail

    async def publish(self, topic: str, payload: Dict[str, Any]) -> None:
        if self.fail:
            raise ConnectionError("bus down")
        self.messages.append((topic, payload))

    def on(self, topic: str) -> List[Dict[str, Any]]:
        return [payload for name, payload in self.messages if name == topic]


class StubArchive:
    def __init__(self, fail: bool = False) -> None:
        self.readings: List[Tuple[str, Reading]] = []
        self.fail = fail

    async def store(self, series_id: str, reading: Reading) -> None:
        if self.fail:
            raise ConnectionError("archive down")
        self.readings.append((series_id, reading))


@pytest.fixture()
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture()
def fake_mongo() -> FakeMongoDatabase:
    return FakeMongoDatabase()
