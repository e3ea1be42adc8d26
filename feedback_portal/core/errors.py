# path: feedback_portal/core/errors.py
"""
Ошибки предметной области и их отображение в HTTP.

Все ошибки наследуются от FeedbackPortalError (status_code + message).
Store/сервисы бросают их напрямую, роуты ничего не ловят —
ответ формирует единый обработчик, зарегистрированный в main.create_app().
"""
from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse

from feedback_portal.app_logging import get_logger

log = get_logger("errors")

GENERIC_SERVER_ERROR = "Internal Server Error"


class FeedbackPortalError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = GENERIC_SERVER_ERROR

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FeedbackPortalError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Unauthorized(FeedbackPortalError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class NotFound(FeedbackPortalError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(FeedbackPortalError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class PayloadTooLarge(FeedbackPortalError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    default_message = "Payload Too Large"


class StorageError(FeedbackPortalError):
    """Сбой хранилища. Детали только в лог, клиенту — общий текст."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


async def portal_error_handler(request: Request, exc: FeedbackPortalError) -> ORJSONResponse:
    if exc.status_code >= 500:
        log.error(
            {
                "event": "request_error",
                "path": request.url.path,
                "method": request.method,
                "kind": type(exc).__name__,
                "error": exc.message,
            },
            exc_info=exc,
        )
        return ORJSONResponse({"error": GENERIC_SERVER_ERROR}, status_code=exc.status_code)

    log.info(
        {
            "event": "request_error",
            "path": request.url.path,
            "method": request.method,
            "status": exc.status_code,
            "error": exc.message,
        }
    )
    return ORJSONResponse({"error": exc.message}, status_code=exc.status_code)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> ORJSONResponse:
    log.info({"event": "request_error", "path": request.url.path, "status": 400, "errors": exc.errors()})
    return ORJSONResponse({"error": "Invalid request body"}, status_code=status.HTTP_400_BAD_REQUEST)


async def unhandled_error_handler(request: Request, exc: Exception) -> ORJSONResponse:
    log.error(
        {"event": "unhandled_error", "path": request.url.path, "method": request.method, "error": str(exc)},
        exc_info=exc,
    )
    return ORJSONResponse({"error": GENERIC_SERVER_ERROR}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FeedbackPortalError, portal_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
