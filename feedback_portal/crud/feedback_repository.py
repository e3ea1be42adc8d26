# path: feedback_portal/crud/feedback_repository.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional, Protocol


@dataclass(frozen=True)
class FeedbackFilter:
    """
    Фильтр списка обращений. Одинаковая семантика для обоих бэкендов:
    - status/category: точное совпадение
    - search: подстрока без учёта регистра в text ИЛИ suggestions
    """
    status: Optional[str] = None
    category: Optional[str] = None
    search: Optional[str] = None

    @classmethod
    def build(
        cls,
        *,
        status: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> "FeedbackFilter":
        def _clean(v: Optional[str]) -> Optional[str]:
            if v is None:
                return None
            s = str(v).strip()
            return s or None

        return cls(status=_clean(status), category=_clean(category), search=_clean(search))

    def matches(self, doc: dict[str, Any]) -> bool:
        if self.status and doc.get("status") != self.status:
            return False
        if self.category and doc.get("category") != self.category:
            return False
        if self.search:
            needle = self.search.lower()
            text = str(doc.get("text") or "").lower()
            suggestions = str(doc.get("suggestions") or "").lower()
            if needle not in text and needle not in suggestions:
                return False
        return True

    def to_mongo(self) -> dict[str, Any]:
        query: dict[str, Any] = {}
        if self.status:
            query["status"] = self.status
        if self.category:
            query["category"] = self.category
        if self.search:
            # пользовательский ввод — литерал, не регэксп
            pattern = re.escape(self.search)
            query["$or"] = [
                {"text": {"$regex": pattern, "$options": "i"}},
                {"suggestions": {"$regex": pattern, "$options": "i"}},
            ]
        return query


class IFeedbackRepository(Protocol):
    """
    DI-контракт хранилища обращений.

    Важно:
    - Документы — dict с camelCase-ключами (как в JSON-файле и в Mongo).
    - "не найдено" возвращается как None/False; ошибки хранилища — StorageError.
    - query сортирует по createdAt по убыванию.
    """

    backend: str

    async def insert(self, doc: dict[str, Any]) -> None: ...

    async def get(self, feedback_id: str) -> Optional[dict[str, Any]]: ...

    async def query(
        self,
        criteria: FeedbackFilter,
        *,
        offset: int,
        limit: int,
    ) -> tuple[list[dict[str, Any]], int]: ...

    async def update(self, feedback_id: str, changes: dict[str, Any]) -> Optional[dict[str, Any]]: ...

    async def delete(self, feedback_id: str) -> bool: ...

    async def close(self) -> None: ...
