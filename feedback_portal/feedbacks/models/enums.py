# path: feedback_portal/feedbacks/models/enums.py
from __future__ import annotations

from enum import Enum


class FeedbackStatus(str, Enum):
    """
    Статус обращения.

    Переходы между значениями не ограничены (можно вернуть resolved -> pending).
    """

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"

    @classmethod
    def values(cls) -> list[str]:
        return [s.value for s in cls]
