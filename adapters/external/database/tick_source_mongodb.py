from __future__ import annotations

from typing import Any, AsyncIterator, Dict

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from core.repositories.tick_source_repository import TickSourceRepository, TickSourceUnavailableError


class TickSourceMongoDB(TickSourceRepository):
    """
    MongoDB source of raw ticks.

    Documents are expected to carry `time` (BSON date or string), `code` and
    `price`. No ordering is requested from the server: the index builder sorts
    every hour bucket by timestamp itself.
    """

    name = "mongodb"

    COLLECTION = "order_books"
    PROJECTION = {"_id": 0, "time": 1, "code": 1, "price": 1}

    def __init__(self, db: AsyncIOMotorDatabase, *, collection: str | None = None, batch_size: int = 5_000):
        self._db = db
        self._collection = collection or self.COLLECTION
        self._batch_size = int(batch_size)

    async def iter_rows(self) -> AsyncIterator[Dict[str, Any]]:
        col = self._db[self._collection]
        try:
            cursor = col.find({}, projection=self.PROJECTION, batch_size=self._batch_size)
            async for doc in cursor:
                yield doc
        except PyMongoError as exc:
            raise TickSourceUnavailableError(f"cannot read ticks from {self._collection}: {exc}") from exc
