# path: feedback_portal/feedbacks/models/__init__.py
from __future__ import annotations

from feedback_portal.feedbacks.models.enums import FeedbackStatus

__all__ = [
    "FeedbackStatus",
]
