# path: feedback_portal/core/services/auth_service.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from jose import JWTError
from pydantic import BaseModel

from feedback_portal.app_logging import get_logger
from feedback_portal.core.config import AuthConfig, settings
from feedback_portal.core.errors import Unauthorized, ValidationError
from feedback_portal.core.security import create_access_token, decode_token

log = get_logger("service.auth")


class AdminSession(BaseModel):
    department: str
    expires_at: datetime


class AuthService:
    """
    Сессии администраторов отделов.

    Важно:
    - Пароли отделов берутся из конфига (AuthConfig.department_passwords()),
      сравнение — обычное строковое равенство.
    - Сессия = подписанный JWT с exp, на сервере ничего не хранится.
      Logout только чистит cookie; выданный Bearer живёт до своего exp.
    """

    def __init__(self, cfg: Optional[AuthConfig] = None) -> None:
        self.cfg: AuthConfig = cfg or settings.auth

    # --- Логин ---
    def login(self, *, department: Optional[str], password: Optional[str]) -> str:
        if not department or not password:
            log.info({"event": "login_fail", "reason": "missing_fields"})
            raise ValidationError("Department and password are required")

        passwords = self.cfg.department_passwords()
        expected = passwords.get(department)
        if not expected:
            log.info({"event": "login_fail", "reason": "unknown_department", "department": department})
            raise Unauthorized("Invalid department")

        if str(expected) != str(password):
            log.info({"event": "login_fail", "reason": "wrong_password", "department": department})
            raise Unauthorized("Invalid password")

        token = create_access_token(subject=department, expires_seconds=self.cfg.session_ttl_seconds)
        log.info({"event": "login_ok", "department": department})
        return token

    # --- Проверка токена ---
    def verify(self, token: Optional[str]) -> AdminSession:
        if not token:
            raise Unauthorized()
        try:
            payload = decode_token(token)
        except JWTError as e:
            log.info({"event": "jwt_error", "error": str(e)})
            raise Unauthorized() from e

        department = payload.get("sub")
        exp = payload.get("exp")
        if not department or exp is None:
            log.info({"event": "jwt_error", "error": "missing_claims"})
            raise Unauthorized()

        return AdminSession(
            department=str(department),
            expires_at=datetime.fromtimestamp(int(exp), tz=timezone.utc),
        )
