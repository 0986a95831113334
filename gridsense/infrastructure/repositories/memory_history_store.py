"""Bounded in-process history store used when Redis is unavailable."""

from bisect import bisect_left
from collections import OrderedDict
from datetime import datetime
from typing import List

from gridsense.domain.entities.reading import HistoryPoint, Reading
from gridsense.domain.repositories.history_store import IHistoryStore


class InMemoryHistoryStore(IHistoryStore):
    """
    Keeps at most ``max_points_per_series`` points for at most
    ``max_series`` series. A point with an already stored timestamp
    replaces the previous one, mirroring the Redis timeline.
    """

    def __init__(self, max_points_per_series: int = 1000, max_series: int = 1000):
        self._max_points = max(1, max_points_per_series)
        self._max_series = max(1, max_series)
        self._series: "OrderedDict[str, List[HistoryPoint]]" = OrderedDict()

    async def append(self, series_id: str, reading: Reading) -> bool:
        points = self._series.get(series_id)
        if points is None:
            while len(self._series) >= self._max_series:
                self._series.popitem(last=False)
            points = []
            self._series[series_id] = points
        else:
            self._series.move_to_end(series_id)

        point = HistoryPoint(timestamp=reading.timestamp, price=reading.price)
        timestamps = [existing.timestamp for existing in points]
        index = bisect_left(timestamps, point.timestamp)
        if index < len(points) and points[index].timestamp == point.timestamp:
            points[index] = point
        else:
            points.insert(index, point)
        del points[: max(0, len(points) - self._max_points)]
        return True

    async def fetch_window(self, series_id: str, max_points: int) -> List[HistoryPoint]:
        if max_points <= 0:
            return []
        return list(self._series.get(series_id, [])[-max_points:])

    async def fetch_range(
        self, series_id: str, start: datetime, end: datetime, limit: int
    ) -> List[HistoryPoint]:
        if limit <= 0:
            return []
        matching = [
            point
            for point in self._series.get(series_id, [])
            if start <= point.timestamp <= end
        ]
        return matching[-limit:]
