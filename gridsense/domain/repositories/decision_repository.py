"""
Domain Repository Interface - Decisions

Durable storage of the decisions emitted by the pipeline.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from gridsense.domain.entities.decision import Decision


class IDecisionRepository(ABC):
    """Interface for decision persistence."""

    @abstractmethod
    async def insert(self, series_id: str, decision: Decision) -> None:
        """Store a decision row for the series."""
        pass

    @abstractmethod
    async def find_latest(self, series_id: str) -> Optional[Dict[str, Any]]:
        """Return the newest stored decision of the series, if any."""
        pass
