# path: feedback_portal/feedbacks/api/feedbacks.py
from __future__ import annotations

from typing import Annotated, Any, Optional

from fastapi import APIRouter, Body, Depends, Response, status

from feedback_portal.app_logging import get_logger
from feedback_portal.core.dependencies import get_current_admin, get_feedback_store
from feedback_portal.core.services.auth_service import AdminSession
from feedback_portal.feedbacks.schemas.feedback import StatusUpdateIn
from feedback_portal.feedbacks.services.feedback_store import FeedbackStore

router = APIRouter(tags=["feedbacks"])
log = get_logger("api.feedbacks")

Store = Annotated[FeedbackStore, Depends(get_feedback_store)]
Admin = Annotated[AdminSession, Depends(get_current_admin)]


@router.get("")
async def list_feedbacks(
    store: Store,
    limit: Optional[str] = None,
    page: Optional[str] = None,
    status: Optional[str] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
) -> dict[str, Any]:
    """
    Список с фильтрами и пагинацией.
    limit/page строками: мусор -> значения по умолчанию, а не 422.
    """
    result = await store.list(status=status, category=category, search=search, page=page, limit=limit)
    return result.to_response()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_feedback(
    store: Store,
    body: Annotated[dict[str, Any], Body()],
) -> dict[str, Any]:
    record = await store.create(body)
    return record.to_document()


@router.get("/{feedback_id}")
async def get_feedback(feedback_id: str, store: Store) -> dict[str, Any]:
    record = await store.get(feedback_id)
    return record.to_document()


@router.patch("/{feedback_id}/status")
async def update_feedback_status(
    feedback_id: str,
    store: Store,
    admin: Admin,
    body: Optional[StatusUpdateIn] = None,
) -> dict[str, Any]:
    body = body or StatusUpdateIn()
    record = await store.update_status(feedback_id, body.status, body.admin_comment)
    log.info({"event": "status_changed_by", "id": feedback_id, "department": admin.department})
    return record.to_document()


@router.patch("/{feedback_id}/resolve")
async def resolve_feedback(feedback_id: str, store: Store, admin: Admin) -> dict[str, Any]:
    """Legacy-эндпоинт: принудительно status=resolved."""
    record = await store.resolve(feedback_id)
    log.info({"event": "status_changed_by", "id": feedback_id, "department": admin.department})
    return record.to_document()


@router.delete("/{feedback_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_feedback(feedback_id: str, store: Store, admin: Admin) -> Response:
    await store.delete(feedback_id)
    log.info({"event": "deleted_by", "id": feedback_id, "department": admin.department})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
