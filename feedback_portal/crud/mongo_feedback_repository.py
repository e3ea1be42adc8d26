# path: feedback_portal/crud/mongo_feedback_repository.py
from __future__ import annotations

import asyncio
from typing import Any, Optional

from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from feedback_portal.app_logging import get_logger
from feedback_portal.core.errors import ConflictError, StorageError
from feedback_portal.crud.feedback_repository import FeedbackFilter, IFeedbackRepository

log = get_logger("repo.mongo_feedback")

# _id наружу не отдаём
PROJECTION = {"_id": 0}


class MongoFeedbackRepository(IFeedbackRepository):
    """
    Хранилище обращений в коллекции MongoDB (async pymongo).

    Важно:
    - Индексы: id (unique) и createdAt (desc) — ensure_indexes() на старте.
    - Коллизия id ловится уникальным индексом -> ConflictError.
    - Каждая операция трогает один документ, транзакции не нужны.
    - Клиент (AsyncMongoClient) создаёт и закрывает StorageHelper.
    """

    backend = "mongo"

    def __init__(self, collection: Any, client: Any = None) -> None:
        self.collection = collection
        self.client = client

    async def ensure_indexes(self) -> None:
        await self.collection.create_index([("id", ASCENDING)], unique=True)
        await self.collection.create_index([("createdAt", DESCENDING)])

    async def insert(self, doc: dict[str, Any]) -> None:
        # insert_one дописывает _id в переданный dict — отдаём копию
        try:
            await self.collection.insert_one(dict(doc))
        except DuplicateKeyError as e:
            raise ConflictError(f"Feedback {doc.get('id')} already exists") from e
        except PyMongoError as e:
            raise StorageError(f"mongo insert failed: {e}") from e

    async def get(self, feedback_id: str) -> Optional[dict[str, Any]]:
        try:
            return await self.collection.find_one({"id": feedback_id}, PROJECTION)
        except PyMongoError as e:
            raise StorageError(f"mongo find_one failed: {e}") from e

    async def query(
        self,
        criteria: FeedbackFilter,
        *,
        offset: int,
        limit: int,
    ) -> tuple[list[dict[str, Any]], int]:
        mongo_query = criteria.to_mongo()
        cursor = (
            self.collection.find(mongo_query, PROJECTION)
            .sort("createdAt", DESCENDING)
            .skip(offset)
            .limit(limit)
        )
        try:
            items, total = await asyncio.gather(
                cursor.to_list(length=None),
                self.collection.count_documents(mongo_query),
            )
        except PyMongoError as e:
            raise StorageError(f"mongo query failed: {e}") from e
        return list(items), int(total)

    async def update(self, feedback_id: str, changes: dict[str, Any]) -> Optional[dict[str, Any]]:
        try:
            return await self.collection.find_one_and_update(
                {"id": feedback_id},
                {"$set": changes},
                projection=PROJECTION,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise StorageError(f"mongo find_one_and_update failed: {e}") from e

    async def delete(self, feedback_id: str) -> bool:
        try:
            res = await self.collection.delete_one({"id": feedback_id})
        except PyMongoError as e:
            raise StorageError(f"mongo delete_one failed: {e}") from e
        return res.deleted_count > 0

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()
            log.info({"event": "mongo_closed"})
