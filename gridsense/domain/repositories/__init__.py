"""
Repositories Package

This package contains interfaces defining repository contracts
for data access operations. Specific implementations are provided
by the infrastructure layer.
"""

from .decision_repository import IDecisionRepository
from .history_store import IHistoryStore
from .reading_archive import IReadingArchive

__all__ = ["IDecisionRepository", "IHistoryStore", "IReadingArchive"]
