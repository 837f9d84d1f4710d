"""
Nexio Backend — Notification Routes
====================================

    GET  /api/notifications                 the caller's inbox, newest first
    POST /api/notifications/mark-all-read   mark every unread one read
    POST /api/notifications/{id}/read       mark one read (owner only)

mark-all-read is registered before /{id}/read; both are POSTs, and the
literal path must win.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nexio.database import commit_session, get_db_session
from nexio.routes.deps import require_caller_id
from nexio.schemas.common import ErrorResponse, SuccessResponse
from nexio.schemas.notification import MarkAllReadResponse, NotificationResponse
from nexio.services.notification_service import notification_service

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])

UNAUTHORIZED = {401: {"description": "No caller identity", "model": ErrorResponse}}


@router.get("", response_model=List[NotificationResponse], responses=UNAUTHORIZED)
async def list_notifications(
    caller_id: str = Depends(require_caller_id),
    db: AsyncSession = Depends(get_db_session),
) -> List[NotificationResponse]:
    return await notification_service.list_for_user(db, caller_id)


@router.post("/mark-all-read", response_model=MarkAllReadResponse, responses=UNAUTHORIZED)
async def mark_all_read(
    caller_id: str = Depends(require_caller_id),
    db: AsyncSession = Depends(get_db_session),
) -> MarkAllReadResponse:
    updated = await notification_service.mark_all_read(db, caller_id)
    await commit_session(db)
    return MarkAllReadResponse(updated=updated)


@router.post(
    "/{notification_id}/read",
    response_model=SuccessResponse,
    responses={
        **UNAUTHORIZED,
        403: {"description": "Not your notification", "model": ErrorResponse},
        404: {"description": "Notification not found", "model": ErrorResponse},
    },
)
async def mark_read(
    notification_id: str,
    caller_id: str = Depends(require_caller_id),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    await notification_service.mark_read(db, notification_id, caller_id)
    await commit_session(db)
    return SuccessResponse()
