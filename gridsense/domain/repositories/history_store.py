"""
Domain Repository Interface - History Store

Rolling per-series price history used to build forecasting windows.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

from gridsense.domain.entities.reading import HistoryPoint, Reading


class IHistoryStore(ABC):
    """Interface for per-series price history."""

    @abstractmethod
    async def append(self, series_id: str, reading: Reading) -> bool:
        """
        Persist a reading under its series.

        Implementations never raise: a failed write returns False so the
        caller can keep the point in its working window.
        """
        pass

    @abstractmethod
    async def fetch_window(self, series_id: str, max_points: int) -> List[HistoryPoint]:
        """Most recent ``max_points`` points, oldest first."""
        pass

    @abstractmethod
    async def fetch_range(
        self, series_id: str, start: datetime, end: datetime, limit: int
    ) -> List[HistoryPoint]:
        """Most recent ``limit`` points inside ``[start, end]``, oldest first."""
        pass
