# path: feedback_portal/crud/__init__.py
from __future__ import annotations

from feedback_portal.crud.feedback_repository import FeedbackFilter, IFeedbackRepository
from feedback_portal.crud.json_feedback_repository import JsonFeedbackRepository
from feedback_portal.crud.mongo_feedback_repository import MongoFeedbackRepository
from feedback_portal.crud.write_queue import SerialWriteQueue

__all__ = [
    "FeedbackFilter",
    "IFeedbackRepository",
    "JsonFeedbackRepository",
    "MongoFeedbackRepository",
    "SerialWriteQueue",
]
