# path: feedback_portal/core/security.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt

from feedback_portal.core.config import settings


def create_access_token(
    *,
    subject: str,
    expires_seconds: Optional[int] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> str:
    """Создаёт подписанный JWT сессии администратора (sub = отдел)."""
    to_encode: Dict[str, Any] = {"sub": str(subject)}
    if extra:
        to_encode.update(extra)
    now = datetime.now(timezone.utc)
    ttl = expires_seconds if expires_seconds is not None else settings.auth.session_ttl_seconds
    to_encode["iat"] = int(now.timestamp())
    to_encode["exp"] = int((now + timedelta(seconds=ttl)).timestamp())
    return jwt.encode(to_encode, settings.auth.secret_key, algorithm=settings.auth.algorithm)


def decode_token(token: str) -> Dict[str, Any]:
    """
    Декодирует и валидирует JWT. Бросает jose.JWTError при неверной подписи/просрочке.
    """
    payload = jwt.decode(token, settings.auth.secret_key, algorithms=[settings.auth.algorithm])
    # payload уже проверен по exp
    return dict(payload)
