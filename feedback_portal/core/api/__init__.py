# feedback_portal/core/api/__init__.py
from fastapi import APIRouter

from .auth import router as auth_router
from feedback_portal.core.config import settings
from feedback_portal.feedbacks.api import router as feedbacks_router

router = APIRouter(
    prefix=settings.api.prefix
)

# /api/login, /api/logout
router.include_router(
    auth_router,
)

# /api/feedbacks/...
router.include_router(
    feedbacks_router,
    prefix=settings.api.feedbacks,
)
