"""Bounded per-series buffer of recent readings for streaming forecasts."""

from __future__ import annotations

from collections import OrderedDict, deque
from typing import Deque, List

from gridsense.domain.entities.reading import HistoryPoint


class StreamBuffer:
    """
    Fixed-capacity ring buffer per series.

    Each series keeps at most ``capacity`` points, oldest evicted first. At
    most ``max_series`` series are tracked; adding a new one beyond that
    drops the series that was updated least recently.
    """

    def __init__(self, capacity: int = 48, max_series: int = 100):
        self.capacity = max(1, capacity)
        self.max_series = max(1, max_series)
        self._series: "OrderedDict[str, Deque[HistoryPoint]]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._series)

    def __contains__(self, series_id: object) -> bool:
        return series_id in self._series

    def append(self, series_id: str, point: HistoryPoint) -> int:
        """Add a point and return the series' buffered size."""
        buffer = self._series.get(series_id)
        if buffer is None:
            while len(self._series) >= self.max_series:
                self._series.popitem(last=False)
            buffer = deque(maxlen=self.capacity)
            self._series[series_id] = buffer
        else:
            self._series.move_to_end(series_id)
        buffer.append(point)
        return len(buffer)

    def snapshot(self, series_id: str) -> List[HistoryPoint]:
        return list(self._series.get(series_id, ()))
