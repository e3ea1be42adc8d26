# path: feedback_portal/feedbacks/schemas/feedback.py
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from feedback_portal.feedbacks.models.enums import FeedbackStatus


class CamelSchema(BaseModel):
    """
    Базовая схема: в JSON/Mongo ключи camelCase (studentName, createdAt, ...),
    в Python — snake_case.
    """
    # числа из старых записей и запросов (urgency: 3, adminComment: 42) -> строки
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)


class FeedbackRecord(CamelSchema):
    """
    Обращение студента в том виде, в каком оно хранится.

    Необязательные поля = None и НЕ попадают в документ (to_document()).
    Неизвестные ключи из хранилища сохраняются и отдаются как есть.
    """
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., examples=["FB-x1Y2z3W4"])
    category: str
    subcategory: str
    text: str
    urgency: str
    status: FeedbackStatus = FeedbackStatus.PENDING

    suggestions: Optional[str] = None
    student_name: Optional[str] = None
    roll_no: Optional[str] = None
    department: Optional[str] = None
    course_no: Optional[str] = None
    admin_comment: Optional[str] = None

    created_at: str
    created_at_display: Optional[str] = None
    updated_at: Optional[str] = None
    updated_at_display: Optional[str] = None

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "FeedbackRecord":
        return cls.model_validate({k: v for k, v in doc.items() if k != "_id"})


class StatusUpdateIn(CamelSchema):
    # строкой, а не enum: неверное значение -> 400 от Store, а не 422 от FastAPI
    status: Optional[str] = None
    admin_comment: Optional[str] = None


class LoginIn(BaseModel):
    department: Optional[str] = None
    password: Optional[str] = None


class PaginationOut(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class FeedbackPage(BaseModel):
    items: list[FeedbackRecord]
    total: int
    page: int
    limit: int
    pages: int

    def to_response(self) -> dict[str, Any]:
        return {
            "data": [r.to_document() for r in self.items],
            "pagination": PaginationOut(
                total=self.total, page=self.page, limit=self.limit, pages=self.pages
            ).model_dump(),
        }
