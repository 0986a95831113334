"""Admission control primitives owned by a single ingest coordinator."""

from __future__ import annotations

import time
from typing import Callable


class RateWindow:
    """
    Fixed-window message cap.

    The window restarts once at least ``window_seconds`` have elapsed since
    it opened. Calls beyond ``max_per_window`` inside a window are refused.
    """

    def __init__(
        self,
        max_per_window: int,
        window_seconds: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_per_window = max_per_window
        self.window_seconds = window_seconds
        self._clock = clock
        self.window_start = clock()
        self.count_in_window = 0

    def allow(self) -> bool:
        now = self._clock()
        if now - self.window_start >= self.window_seconds:
            self.window_start = now
            self.count_in_window = 0
        self.count_in_window += 1
        return self.count_in_window <= self.max_per_window


class NthSampler:
    """Keeps admitted positions 0, n, 2n, ... counted since construction."""

    def __init__(self, every_n: int = 1):
        self.every_n = max(1, int(every_n))
        self.counter = 0

    def should_process(self) -> bool:
        keep = self.counter % self.every_n == 0
        self.counter += 1
        return keep
