import random

import structlog
from pymongo import UpdateOne

from showcase.core.db import storage_errors
from showcase.core.modules.content.models import ContentType
from showcase.core.modules.content.service import ContentService
from showcase.core.modules.work.models import RANDOM_ORDER_START, WORK_SCHEMA, Work
from showcase.utils import now

logger = structlog.get_logger(__name__)


class WorkService(ContentService[Work]):
    content_type = ContentType.WORK
    collection_name = "works"
    record_type = Work
    schema = WORK_SCHEMA
    label = "Work"
    sort = [("order", 1), ("created_at", -1)]
    indexes = [[("order", 1)], [("category", 1)]]

    async def randomize_order(self) -> int:
        """Shuffle all works and assign consecutive orders starting at RANDOM_ORDER_START.

        Returns:
            Number of works reordered
        """
        with storage_errors():
            ids = [doc["_id"] async for doc in self._collection.find({}, {"_id": 1})]
        random.shuffle(ids)
        if not ids:
            return 0

        timestamp = now()
        operations = [
            UpdateOne({"_id": work_id}, {"$set": {"order": RANDOM_ORDER_START + index, "updated_at": timestamp}})
            for index, work_id in enumerate(ids)
        ]
        with storage_errors():
            await self._collection.bulk_write(operations, ordered=False)

        logger.info("works_order_randomized", count=len(ids))
        return len(ids)
