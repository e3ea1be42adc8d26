# path: feedback_portal/main.py
from __future__ import annotations

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse

from feedback_portal.app_logging import get_logger
from feedback_portal.core.api import router as api_router
from feedback_portal.core.config import settings
from feedback_portal.core.errors import PayloadTooLarge, register_error_handlers
from feedback_portal.core.storage import storage_helper

log = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup: Mongo или JSON-файл — решается один раз
    await storage_helper.init()
    yield
    # shutdown
    await storage_helper.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Student Feedback Portal",
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    app.add_middleware(GZipMiddleware, minimum_size=1024)

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        # ответ прямо отсюда: исключения из middleware не доходят до exception handlers
        length = request.headers.get("content-length")
        if length and length.isdigit() and int(length) > settings.limits.json_body_bytes:
            err = PayloadTooLarge()
            log.info({"event": "request_error", "path": request.url.path, "status": err.status_code, "bytes": int(length)})
            return ORJSONResponse({"error": err.message}, status_code=err.status_code)
        return await call_next(request)

    register_error_handlers(app)

    @app.get("/health", tags=["health"])
    async def health():
        return {"ok": True}

    app.include_router(api_router)
    return app


# Экспортируемый объект приложения
main_app = create_app()


if __name__ == "__main__":
    # Запуск: python -m feedback_portal.main
    uvicorn.run(
        "feedback_portal.main:main_app",
        host=settings.run.host,
        port=settings.run.port,
    )
