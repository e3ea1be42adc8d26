# feedback_portal/feedbacks/api/__init__.py
from .feedbacks import router

__all__ = ["router"]
