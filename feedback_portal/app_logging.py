"""
# path: feedback_portal/app_logging.py

JSON-логи портала: одна строка JSON на событие, stdout.

Как пользоваться:
    log = get_logger("repo.json_feedback")
    log.info({"event": "feedback_created", "id": "FB-..."})
    repo_log = log.bind(path="data/feedbacks.json")   # поле попадёт в каждое событие

- Все логгеры живут под корнем "feedback_portal"; обработчик и уровень
  (LOG_LEVEL) ставятся один раз на корень.
- Файл НЕ должен называться logging.py (перекроет stdlib `logging`).
- Пароли и токены не пишем; на всякий случай такие ключи маскируются.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Mapping

import orjson

ROOT_LOGGER = "feedback_portal"
REDACTED = "***"
SECRET_KEYS = frozenset({"password", "token", "secret_key", "authorization"})


def _redact(fields: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: (REDACTED if k.lower() in SECRET_KEYS else v) for k, v in fields.items()}


class JsonFormatter(logging.Formatter):
    """LogRecord -> JSON: time/level/logger/func + поля события."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "func": record.funcName,
        }

        if isinstance(record.msg, Mapping):
            payload.update(_redact(record.msg))
        else:
            payload["message"] = record.getMessage()

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return orjson.dumps(payload, default=str).decode()


class JsonLoggerAdapter(logging.LoggerAdapter):
    """Подмешивает привязанный контекст (bind) в каждое событие."""

    def process(self, msg: Any, kwargs: Dict[str, Any]):
        if not self.extra:
            return msg, kwargs
        if isinstance(msg, Mapping):
            return {**self.extra, **msg}, kwargs
        return {**self.extra, "message": str(msg)}, kwargs

    def bind(self, **fields: Any) -> "JsonLoggerAdapter":
        return JsonLoggerAdapter(self.logger, {**self.extra, **fields})


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if root.handlers:
        return root

    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    root.setLevel(level)
    root.propagate = False

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    return root


def get_logger(name: str) -> JsonLoggerAdapter:
    """Логгер "feedback_portal.<name>" (idempotent)."""
    _configure_root()
    return JsonLoggerAdapter(logging.getLogger(f"{ROOT_LOGGER}.{name}"), {})
