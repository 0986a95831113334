"""
Repositories Package - Infrastructure Layer

This package contains concrete implementations of the repository
interfaces defined in the domain layer. These implementations
handle the details of data persistence.
"""

from .memory_history_store import InMemoryHistoryStore
from .mongo_decision_repository import MongoDecisionRepository
from .mongo_reading_archive import MongoReadingArchive
from .redis_history_store import RedisHistoryStore

__all__ = [
    "InMemoryHistoryStore",
    "MongoDecisionRepository",
    "MongoReadingArchive",
    "RedisHistoryStore",
]
