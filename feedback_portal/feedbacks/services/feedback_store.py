# path: feedback_portal/feedbacks/services/feedback_store.py
from __future__ import annotations

import secrets
import string
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from pydantic import ValidationError as SchemaError

from feedback_portal.app_logging import get_logger
from feedback_portal.core.config import LimitsConfig, settings
from feedback_portal.core.errors import NotFound, ValidationError
from feedback_portal.core.utils import build_page_params, page_count
from feedback_portal.crud.feedback_repository import FeedbackFilter, IFeedbackRepository
from feedback_portal.feedbacks.models.enums import FeedbackStatus
from feedback_portal.feedbacks.schemas.feedback import FeedbackPage, FeedbackRecord

log = get_logger("service.feedback_store")

ID_PREFIX = "FB-"
ID_LENGTH = 8
ID_ALPHABET = string.ascii_letters + string.digits + "_-"

REQUIRED_FIELDS = ("category", "subcategory", "text", "urgency")


def new_feedback_id() -> str:
    return ID_PREFIX + "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))


def iso_timestamp(moment: datetime) -> str:
    """2026-10-19T02:08:00.123Z — сортируется как строка."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def display_timestamp(moment: datetime) -> str:
    return moment.strftime("%b %d, %Y, %I:%M %p")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clip(value: Any, max_len: int) -> str:
    return str(value).strip()[:max_len]


def _to_record(doc: Mapping[str, Any]) -> Optional[FeedbackRecord]:
    """Запись из хранилища; битую (чужая схема, нет полей) пропускаем с WARNING."""
    try:
        return FeedbackRecord.from_document(dict(doc))
    except SchemaError as e:
        log.warning({"event": "feedback_bad_record", "id": doc.get("id"), "errors": e.error_count()})
        return None


class FeedbackStore:
    """
    Единый контракт работы с обращениями поверх любого репозитория.

    Важно:
    - Repo приходит через DI: вызывающий код не знает, Mongo это или JSON-файл.
    - Валидация и NotFound — здесь; ошибки хранилища летят дальше (StorageError).
    """

    def __init__(
        self,
        repo: IFeedbackRepository,
        *,
        limits: Optional[LimitsConfig] = None,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = new_feedback_id,
    ) -> None:
        self.repo = repo
        self.limits = limits or settings.limits
        self.clock = clock
        self.id_factory = id_factory

    @property
    def backend(self) -> str:
        return self.repo.backend

    # --- Создание ---
    async def create(self, fields: Mapping[str, Any]) -> FeedbackRecord:
        if any(not fields.get(name) for name in REQUIRED_FIELDS):
            raise ValidationError(f"{', '.join(REQUIRED_FIELDS)} are required")

        lim = self.limits
        optional_caps = {
            "suggestions": lim.max_suggestions_len,
            "student_name": lim.max_name_len,
            "roll_no": lim.max_short_len,
            "department": lim.max_short_len,
            "course_no": lim.max_short_len,
        }
        aliases = {
            "student_name": "studentName",
            "roll_no": "rollNo",
            "course_no": "courseNo",
        }

        optional: dict[str, str] = {}
        for name, cap in optional_caps.items():
            raw = fields.get(aliases.get(name, name))
            if raw is None:
                raw = fields.get(name)
            if not raw:
                continue
            value = _clip(raw, cap)
            if value:
                optional[name] = value

        now = self.clock()
        record = FeedbackRecord(
            id=self.id_factory(),
            category=str(fields["category"]),
            subcategory=_clip(fields["subcategory"], lim.max_short_len),
            text=_clip(fields["text"], lim.max_text_len),
            urgency=str(fields["urgency"]),
            status=FeedbackStatus.PENDING,
            created_at=iso_timestamp(now),
            created_at_display=display_timestamp(now),
            **optional,
        )

        await self.repo.insert(record.to_document())
        log.info({"event": "feedback_created", "id": record.id, "category": record.category, "backend": self.backend})
        return record

    # --- Список ---
    async def list(
        self,
        *,
        status: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
        page: Any = None,
        limit: Any = None,
    ) -> FeedbackPage:
        params = build_page_params(page=page, limit=limit)
        criteria = FeedbackFilter.build(status=status, category=category, search=search)

        docs, total = await self.repo.query(criteria, offset=params.offset, limit=params.limit)
        records = [r for r in map(_to_record, docs) if r is not None]
        return FeedbackPage(
            items=records,
            total=total,
            page=params.page,
            limit=params.limit,
            pages=page_count(total, params.limit),
        )

    # --- Карточка ---
    async def get(self, feedback_id: str) -> FeedbackRecord:
        doc = await self.repo.get(feedback_id)
        record = _to_record(doc) if doc is not None else None
        if record is None:
            raise NotFound()
        return record

    # --- Смена статуса ---
    async def update_status(
        self,
        feedback_id: str,
        status: Optional[str],
        admin_comment: Optional[str] = None,
    ) -> FeedbackRecord:
        if not status or status not in FeedbackStatus.values():
            raise ValidationError("Invalid status. Must be pending, in-progress, or resolved")
        status = FeedbackStatus(status).value

        now = self.clock()
        changes: dict[str, Any] = {
            "status": status,
            "updatedAt": iso_timestamp(now),
            "updatedAtDisplay": display_timestamp(now),
        }
        # без комментария старый adminComment не трогаем
        if admin_comment:
            comment = str(admin_comment).strip()
            if comment:
                changes["adminComment"] = comment

        doc = await self.repo.update(feedback_id, changes)
        if doc is None:
            raise NotFound()

        log.info({"event": "feedback_status_updated", "id": feedback_id, "status": status})
        return FeedbackRecord.from_document(doc)

    async def resolve(self, feedback_id: str) -> FeedbackRecord:
        return await self.update_status(feedback_id, FeedbackStatus.RESOLVED.value)

    # --- Удаление ---
    async def delete(self, feedback_id: str) -> None:
        if not await self.repo.delete(feedback_id):
            raise NotFound()
        log.info({"event": "feedback_deleted", "id": feedback_id})
