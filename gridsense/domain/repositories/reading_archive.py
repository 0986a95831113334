"""
Domain Repository Interface - Reading Archive

Append-only archive of normalized inbound readings.
"""

from abc import ABC, abstractmethod

from gridsense.domain.entities.reading import Reading


class IReadingArchive(ABC):
    """Interface for the raw reading archive."""

    @abstractmethod
    async def store(self, series_id: str, reading: Reading) -> None:
        """Archive the reading together with its raw payload."""
        pass
