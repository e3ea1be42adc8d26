# path: feedback_portal/core/api/auth.py
from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Response

from feedback_portal.app_logging import get_logger
from feedback_portal.core.config import settings
from feedback_portal.core.dependencies import get_auth_service
from feedback_portal.core.services.auth_service import AuthService
from feedback_portal.feedbacks.schemas.feedback import LoginIn

router = APIRouter(tags=["auth"])
log = get_logger("api.auth")


@router.post("/login")
async def login(
    response: Response,
    service: Annotated[AuthService, Depends(get_auth_service)],
    body: Optional[LoginIn] = None,
):
    """
    Логин администратора отдела:
    - Принимает {"department": "...", "password": "..."}
    - Ставит httpOnly cookie (для браузера) и возвращает токен (для скриптов)
    """
    body = body or LoginIn()
    token = service.login(department=body.department, password=body.password)

    response.set_cookie(
        key=settings.auth.cookie_name,
        value=token,
        max_age=settings.auth.session_ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.auth.cookie_secure,
    )
    return {"ok": True, "token": token, "department": body.department}


@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie(settings.auth.cookie_name)
    log.info({"event": "logout_ok"})
    return {"ok": True}
