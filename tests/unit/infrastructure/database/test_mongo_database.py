from __future__ import annotations

from typing import Any, Dict

import pymongo.errors
import pytest

from gridsense.infrastructure.database.mongo_database import (
    DECISIONS_COLLECTION,
    RAW_READINGS_COLLECTION,
    MongoDatabase,
)
from tests.conftest import FakeCollection


class _StubDatabase:
    def __init__(self) -> None:
        self.collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())

    @property
    def name(self) -> str:
        return "gridsense_test"


class _StubMongoClient:
    def __init__(self, uri: str, **options: Any) -> None:
        self.uri = uri
        self.options = options
        self.databases: Dict[str, _StubDatabase] = {}
        self.closed = False
        self.commands: list = []
        self.admin = self

    def __getitem__(self, name: str) -> _StubDatabase:
        return self.databases.setdefault(name, _StubDatabase())

    def command(self, name: str) -> dict:
        self.commands.append(name)
        return {"ok": 1}

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def patch_mongo_client(monkeypatch) -> None:
    monkeypatch.setattr(
        "gridsense.infrastructure.database.mongo_database.MongoClient",
        _StubMongoClient,
    )


def test_client_is_timezone_aware() -> None:
    database = MongoDatabase("mongodb://localhost:27017", "gridsense", timeout_ms=250)

    assert database.client.options == {"tz_aware": True, "serverSelectionTimeoutMS": 250}
    database.ping()
    database.close()
    assert database.client.commands == ["ping"]
    assert database.client.closed is True


@pytest.mark.asyncio
async def test_insert_and_find_document() -> None:
    database = MongoDatabase("mongodb://localhost:27017", "gridsense")

    document = {"seriesId": "m-1", "price": 42}
    await database.insert_one(DECISIONS_COLLECTION, document)

    assert await database.find_many(DECISIONS_COLLECTION, {"seriesId": "m-1"}) == [document]


@pytest.mark.asyncio
async def test_find_many_sorts_and_limits() -> None:
    database = MongoDatabase("mongodb://localhost:27017", "gridsense")
    for value in (2, 3, 1):
        await database.insert_one(DECISIONS_COLLECTION, {"seriesId": "m-1", "value": value})

    documents = await database.find_many(
        DECISIONS_COLLECTION, {"seriesId": "m-1"}, sort_by="value", sort_direction=-1, limit=2
    )

    assert [doc["value"] for doc in documents] == [3, 2]


@pytest.mark.asyncio
async def test_insert_one_raises_when_not_acknowledged(monkeypatch) -> None:
    database = MongoDatabase("mongodb://localhost:27017", "gridsense")
    collection = database.db[DECISIONS_COLLECTION]
    monkeypatch.setattr(
        collection,
        "insert_one",
        lambda document: type("Result", (), {"acknowledged": False})(),
    )

    with pytest.raises(pymongo.errors.OperationFailure):
        await database.insert_one(DECISIONS_COLLECTION, {"seriesId": "m-1"})


@pytest.mark.asyncio
async def test_create_indexes() -> None:
    database = MongoDatabase("mongodb://localhost:27017", "gridsense")

    await database.create_indexes()

    raw = database.db[RAW_READINGS_COLLECTION].created_indexes
    decisions = database.db[DECISIONS_COLLECTION].created_indexes
    assert raw[0][0] == [("seriesId", 1), ("timestamp", -1)]
    assert [options["name"] for _, options in decisions] == [
        "series_timestamp_idx",
        "action_type_idx",
    ]
