from typing import Any

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from showcase.core.core import Service
from showcase.core.db import storage_errors
from showcase.core.modules.counter.models import Counter

logger = structlog.get_logger(__name__)


class CounterService(Service):
    """Service for managing auto-incrementing id sequences per resource type."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("counters")

    async def next_id(self, sequence_key: str) -> int:
        """Atomically increment and return the next id for a sequence.

        The counter document is created at 0 on first use, so the first id is 1.
        """
        try:
            result = await self._increment(sequence_key)
        except DuplicateKeyError:
            # Two concurrent upserts raced to create the counter; the loser retries as a plain increment
            logger.debug("counter_upsert_race", sequence_key=sequence_key)
            result = await self._increment(sequence_key)
        return int(result["seq"])

    async def current_id(self, sequence_key: str) -> int:
        """Get the last allocated id without incrementing."""
        with storage_errors():
            doc = await self._collection.find_one({"_id": sequence_key})
        if doc:
            return Counter.model_validate(doc).seq
        return 0

    async def _increment(self, sequence_key: str) -> dict[str, Any]:
        with storage_errors():
            result = await self._collection.find_one_and_update(
                {"_id": sequence_key},
                {"$inc": {"seq": 1}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        return result
