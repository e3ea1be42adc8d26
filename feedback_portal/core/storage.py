# path: feedback_portal/core/storage.py
from __future__ import annotations

from typing import Optional

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from feedback_portal.app_logging import get_logger
from feedback_portal.core.config import MongoConfig, StorageConfig, settings
from feedback_portal.crud.feedback_repository import IFeedbackRepository
from feedback_portal.crud.json_feedback_repository import JsonFeedbackRepository
from feedback_portal.crud.mongo_feedback_repository import MongoFeedbackRepository

log = get_logger("storage")


async def connect_mongo(cfg: MongoConfig) -> Optional[MongoFeedbackRepository]:
    """
    Одна попытка подключения с коротким таймаутом.
    Успех -> индексы + репозиторий; любая ошибка -> None (без ретраев).
    """
    client: Optional[AsyncMongoClient] = None
    try:
        client = AsyncMongoClient(cfg.url, serverSelectionTimeoutMS=cfg.timeout_ms)
        await client.admin.command("ping")
        repo = MongoFeedbackRepository(client[cfg.db][cfg.collection], client=client)
        await repo.ensure_indexes()
    except (PyMongoError, ValueError) as e:
        log.warning({"event": "mongo_unavailable", "error": str(e)})
        if client is not None:
            await client.close()
        return None

    log.info({"event": "mongo_connected", "db": cfg.db, "collection": cfg.collection})
    return repo


class StorageHelper:
    """
    Выбор бэкенда — один раз на старте процесса (lifespan).
    Mongo доступна -> MongoFeedbackRepository, иначе JSON-файл до конца жизни процесса.
    """

    def __init__(self, *, storage: StorageConfig, mongo: MongoConfig) -> None:
        self.storage_cfg = storage
        self.mongo_cfg = mongo
        self._repository: Optional[IFeedbackRepository] = None

    async def init(self) -> IFeedbackRepository:
        repo: Optional[IFeedbackRepository] = None
        if self.mongo_cfg.enabled:
            repo = await connect_mongo(self.mongo_cfg)
        if repo is None:
            repo = JsonFeedbackRepository(self.storage_cfg.data_file)
        self._repository = repo
        log.info({"event": "storage_selected", "backend": repo.backend})
        return repo

    @property
    def repository(self) -> IFeedbackRepository:
        if self._repository is None:
            # без lifespan (скрипты/тесты) — сразу файловое хранилище
            self._repository = JsonFeedbackRepository(self.storage_cfg.data_file)
        return self._repository

    @property
    def backend(self) -> str:
        return self.repository.backend

    async def dispose(self) -> None:
        if self._repository is not None:
            await self._repository.close()
            self._repository = None


storage_helper = StorageHelper(storage=settings.storage, mongo=settings.mongo)
