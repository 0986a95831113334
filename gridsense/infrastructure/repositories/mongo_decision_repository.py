"""
MongoDB Decision Repository - Infrastructure Layer

Durable decision rows: the wire payload plus ``seriesId``, with the
timestamp kept as a BSON date so the newest row can be found by sort.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from gridsense.domain.entities.decision import Decision
from gridsense.domain.repositories.decision_repository import IDecisionRepository
from gridsense.infrastructure.database import DECISIONS_COLLECTION, MongoDatabase


class MongoDecisionRepository(IDecisionRepository):
    """MongoDB implementation of the decision repository."""

    COLLECTION_NAME = DECISIONS_COLLECTION

    def __init__(self, mongo_database: MongoDatabase):
        self.db = mongo_database

    def _to_document(self, series_id: str, decision: Decision) -> Dict[str, Any]:
        document = decision.to_payload()
        document["seriesId"] = series_id
        document["timestamp"] = decision.timestamp
        document["createdAt"] = datetime.now(timezone.utc)
        return document

    async def insert(self, series_id: str, decision: Decision) -> None:
        await self.db.insert_one(
            self.COLLECTION_NAME, self._to_document(series_id, decision)
        )

    async def find_latest(self, series_id: str) -> Optional[Dict[str, Any]]:
        documents = await self.db.find_many(
            self.COLLECTION_NAME,
            {"seriesId": series_id},
            sort_by="timestamp",
            sort_direction=-1,
            limit=1,
        )
        if not documents:
            return None
        document = dict(documents[0])
        document.pop("_id", None)
        document.pop("createdAt", None)
        return document
