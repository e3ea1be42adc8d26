# path: feedback_portal/crud/json_feedback_repository.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

import aiofiles
import aiofiles.os

from feedback_portal.app_logging import get_logger
from feedback_portal.core.errors import ConflictError, StorageError
from feedback_portal.crud.feedback_repository import FeedbackFilter, IFeedbackRepository
from feedback_portal.crud.write_queue import SerialWriteQueue

T = TypeVar("T")

log = get_logger("repo.json_feedback")


class _CorruptDocument(Exception):
    pass


class JsonFeedbackRepository(IFeedbackRepository):
    """
    Файловое хранилище: один JSON-массив со всеми обращениями.

    Правила:
    - Любая мутация = задача read-modify-write в собственной очереди экземпляра
      (SerialWriteQueue). Поэтому N конкурентных create дают ровно N записей.
    - Файл всегда перезаписывается целиком: пишем во временный файл рядом
      и атомарно подменяем (replace) — читатель не увидит "рваный" JSON.
    - Чтение для списка/карточки мягкое: битый JSON -> [] + WARNING в лог.
      Внутри мутации битый JSON -> StorageError, чтобы не затереть файл.
    - Не рассчитано на миллионы записей (тысячи — норм).
    """

    backend = "json"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._queue = SerialWriteQueue(name=f"json:{self.path.name}")
        self._log = log.bind(path=str(self.path))

    # ---------- файл ----------

    async def _ensure_file(self) -> None:
        parent = self.path.parent
        if not await aiofiles.os.path.isdir(parent):
            await aiofiles.os.makedirs(parent, exist_ok=True)
        if not await aiofiles.os.path.exists(self.path):
            # "x": не затираем файл, который успел появиться между проверкой и открытием
            try:
                async with aiofiles.open(self.path, "x", encoding="utf-8") as f:
                    await f.write("[]")
            except FileExistsError:
                pass

    async def _load(self) -> list[dict[str, Any]]:
        await self._ensure_file()
        async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
            raw = await f.read()
        if not raw.strip():
            # только что созданный файл, "[]" ещё не дописан
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise _CorruptDocument(str(e)) from e
        if not isinstance(data, list):
            raise _CorruptDocument(f"expected JSON array, got {type(data).__name__}")
        return [d for d in data if isinstance(d, dict)]

    async def read_all(self) -> list[dict[str, Any]]:
        try:
            return await self._load()
        except _CorruptDocument as e:
            self._log.warning({"event": "json_store_corrupt", "error": str(e)})
            return []

    async def _read_for_write(self) -> list[dict[str, Any]]:
        try:
            return await self._load()
        except _CorruptDocument as e:
            self._log.error({"event": "json_store_corrupt", "error": str(e), "op": "write"})
            raise StorageError(f"feedback file {self.path} is corrupt: {e}") from e

    async def _write_all(self, items: list[dict[str, Any]]) -> None:
        """Полная перезапись файла (tmp -> replace)."""
        await self._ensure_file()
        payload = json.dumps(items, ensure_ascii=False, indent=2)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(payload)
            await f.flush()
        await aiofiles.os.replace(tmp_path, self.path)

    async def _mutate(self, fn: Callable[[list[dict[str, Any]]], tuple[T, bool]]) -> T:
        """
        fn(items) -> (result, changed). Если changed — файл перезаписывается.
        Ошибка записи логируется и не роняет запрос (best-effort durability).
        """

        async def job() -> T:
            items = await self._read_for_write()
            result, changed = fn(items)
            if changed:
                try:
                    await self._write_all(items)
                except OSError as e:
                    self._log.error({"event": "file_write_failed", "error": str(e)}, exc_info=e)
            return result

        return await self._queue.run(job)

    async def drain(self) -> None:
        await self._queue.drain()

    # ---------- IFeedbackRepository ----------

    async def insert(self, doc: dict[str, Any]) -> None:
        def apply(items: list[dict[str, Any]]) -> tuple[None, bool]:
            if any(it.get("id") == doc["id"] for it in items):
                raise ConflictError(f"Feedback {doc['id']} already exists")
            items.insert(0, dict(doc))
            return None, True

        await self._mutate(apply)

    async def get(self, feedback_id: str) -> Optional[dict[str, Any]]:
        for it in await self.read_all():
            if it.get("id") == feedback_id:
                return it
        return None

    async def query(
        self,
        criteria: FeedbackFilter,
        *,
        offset: int,
        limit: int,
    ) -> tuple[list[dict[str, Any]], int]:
        matched = [it for it in await self.read_all() if criteria.matches(it)]
        matched.sort(key=lambda it: str(it.get("createdAt") or ""), reverse=True)
        return matched[offset: offset + limit], len(matched)

    async def update(self, feedback_id: str, changes: dict[str, Any]) -> Optional[dict[str, Any]]:
        def apply(items: list[dict[str, Any]]) -> tuple[Optional[dict[str, Any]], bool]:
            for it in items:
                if it.get("id") == feedback_id:
                    it.update(changes)
                    return dict(it), True
            return None, False

        return await self._mutate(apply)

    async def delete(self, feedback_id: str) -> bool:
        def apply(items: list[dict[str, Any]]) -> tuple[bool, bool]:
            kept = [it for it in items if it.get("id") != feedback_id]
            if len(kept) == len(items):
                return False, False
            items[:] = kept
            return True, True

        return await self._mutate(apply)

    async def close(self) -> None:
        await self.drain()
