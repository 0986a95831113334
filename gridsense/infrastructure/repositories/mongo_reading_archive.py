"""MongoDB archive of normalized inbound readings."""

from datetime import datetime, timezone

from gridsense.domain.entities.reading import Reading
from gridsense.domain.repositories.reading_archive import IReadingArchive
from gridsense.infrastructure.database import RAW_READINGS_COLLECTION, MongoDatabase


class MongoReadingArchive(IReadingArchive):
    """MongoDB implementation of the reading archive."""

    COLLECTION_NAME = RAW_READINGS_COLLECTION

    def __init__(self, mongo_database: MongoDatabase):
        self.db = mongo_database

    async def store(self, series_id: str, reading: Reading) -> None:
        await self.db.insert_one(
            self.COLLECTION_NAME,
            {
                "seriesId": series_id,
                "timestamp": reading.timestamp,
                "price": reading.price,
                "area": reading.area,
                "customer": reading.customer,
                "rawPayload": dict(reading.raw_payload),
                "receivedAt": datetime.now(timezone.utc),
            },
        )
