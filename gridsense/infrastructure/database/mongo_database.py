"""
MongoDB Database - Infrastructure Layer

This module provides a MongoDB database client for the reading archive and
the decision store. It handles connection, collections and indexes.
"""

from typing import Any, Dict, List, Optional

import pymongo.errors
from pymongo import MongoClient
from pymongo.database import Database

from gridsense.shared.logging import get_logger

logger = get_logger(__name__)

RAW_READINGS_COLLECTION = "raw_meter_readings"
DECISIONS_COLLECTION = "decisions"


class MongoDatabase:
    """MongoDB database client."""

    def __init__(self, mongo_uri: str, db_name: str, timeout_ms: int = 5000):
        """
        Initialize the MongoDB database client.

        Args:
            mongo_uri: MongoDB connection URI
            db_name: Name of the database to use
            timeout_ms: Server selection timeout in milliseconds
        """
        self.client: MongoClient = MongoClient(
            mongo_uri, tz_aware=True, serverSelectionTimeoutMS=timeout_ms
        )
        self.db: Database = self.client[db_name]

    async def find_many(
        self,
        collection_name: str,
        query: Dict[str, Any],
        sort_by: Optional[str] = None,
        sort_direction: int = 1,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        """
        Find multiple documents in a collection.

        Args:
            collection_name: Name of the collection
            query: Query to match documents
            sort_by: Field to sort by
            sort_direction: Sort direction (1 for ascending, -1 for descending)
            limit: Maximum number of documents to return

        Returns:
            List of documents
        """
        cursor = self.db[collection_name].find(query)

        if sort_by:
            cursor = cursor.sort(sort_by, sort_direction)

        return list(cursor.limit(limit))

    async def insert_one(
        self, collection_name: str, document: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Insert a document into a collection.

        Raises:
            pymongo.errors.PyMongoError: If the insert is not acknowledged or fails
        """
        result = self.db[collection_name].insert_one(document)
        if not result.acknowledged:
            raise pymongo.errors.OperationFailure(
                f"Failed to insert document in {collection_name}"
            )
        return document

    def ping(self) -> None:
        self.client.admin.command("ping")

    def close(self) -> None:
        """Close the database connection."""
        self.client.close()

    async def create_indexes(self) -> None:
        """
        Create the indexes used by the archive and decision lookups.
        Called once during application startup.
        """
        try:
            self.db[RAW_READINGS_COLLECTION].create_index(
                [("seriesId", 1), ("timestamp", -1)],
                name="series_timestamp_idx",
                background=True,
            )
            self.db[DECISIONS_COLLECTION].create_index(
                [("seriesId", 1), ("timestamp", -1)],
                name="series_timestamp_idx",
                background=True,
            )
            self.db[DECISIONS_COLLECTION].create_index(
                "actionType", name="action_type_idx", background=True
            )
        except pymongo.errors.OperationFailure as exc:
            logger.warning("mongo.index_creation_failed", error=str(exc))
