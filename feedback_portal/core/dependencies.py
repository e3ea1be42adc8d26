# path: feedback_portal/core/dependencies.py
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from feedback_portal.core.config import settings
from feedback_portal.core.services.auth_service import AdminSession, AuthService
from feedback_portal.core.storage import storage_helper
from feedback_portal.crud.feedback_repository import IFeedbackRepository
from feedback_portal.feedbacks.services.feedback_store import FeedbackStore


# auto_error=False: без заголовка пробуем cookie
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api.prefix}/login", auto_error=False)


def get_auth_service() -> AuthService:
    return AuthService(settings.auth)


def get_feedback_repository() -> IFeedbackRepository:
    return storage_helper.repository


def get_feedback_store(
    repo: IFeedbackRepository = Depends(get_feedback_repository),
) -> FeedbackStore:
    return FeedbackStore(repo, limits=settings.limits)


def get_current_admin(
    request: Request,
    bearer: Optional[str] = Depends(oauth2_scheme),
    service: AuthService = Depends(get_auth_service),
) -> AdminSession:
    """
    Bearer-заголовок приоритетнее cookie. Успех -> request.state.admin.
    """
    token = bearer or request.cookies.get(settings.auth.cookie_name)
    admin = service.verify(token)
    request.state.admin = admin
    return admin
