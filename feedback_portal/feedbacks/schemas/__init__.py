# path: feedback_portal/feedbacks/schemas/__init__.py
from __future__ import annotations

from feedback_portal.feedbacks.schemas.feedback import (
    CamelSchema,
    FeedbackPage,
    FeedbackRecord,
    LoginIn,
    PaginationOut,
    StatusUpdateIn,
)

__all__ = [
    "CamelSchema",
    "FeedbackPage",
    "FeedbackRecord",
    "LoginIn",
    "PaginationOut",
    "StatusUpdateIn",
]
