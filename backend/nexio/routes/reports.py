"""
Nexio Backend — Report Routes
==============================

    POST  /api/reports        flag a post (anyone)
    GET   /api/reports        moderation queue (admins)
    PATCH /api/reports/{id}   change a report's status (admins)
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from nexio.database import commit_session, get_db_session
from nexio.models import User
from nexio.routes.deps import require_caller
from nexio.schemas.common import ErrorResponse
from nexio.schemas.report import ReportCreateRequest, ReportResponse, ReportUpdateRequest
from nexio.services.report_service import report_service

router = APIRouter(prefix="/api/reports", tags=["Reports"])

ADMIN_ONLY = {
    401: {"description": "No caller identity", "model": ErrorResponse},
    403: {"description": "Caller is not an admin", "model": ErrorResponse},
}


@router.post(
    "",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "postId, reporterId or reason missing", "model": ErrorResponse},
        404: {"description": "Post or reporter not found", "model": ErrorResponse},
    },
    summary="Report a post",
)
async def create_report(
    payload: ReportCreateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ReportResponse:
    report = await report_service.create(db, payload)
    await commit_session(db)
    return report


@router.get("", response_model=List[ReportResponse], responses=ADMIN_ONLY, summary="List reports")
async def list_reports(
    status_filter: str | None = Query(default=None, alias="status"),
    caller: User = Depends(require_caller),
    db: AsyncSession = Depends(get_db_session),
) -> List[ReportResponse]:
    return await report_service.list_reports(db, caller, status_filter)


@router.patch(
    "/{report_id}",
    response_model=ReportResponse,
    responses={
        **ADMIN_ONLY,
        400: {"description": "Invalid status", "model": ErrorResponse},
        404: {"description": "Report not found", "model": ErrorResponse},
    },
    summary="Update a report's status",
)
async def update_report(
    report_id: str,
    payload: ReportUpdateRequest,
    caller: User = Depends(require_caller),
    db: AsyncSession = Depends(get_db_session),
) -> ReportResponse:
    report = await report_service.update_status(db, report_id, caller, payload)
    await commit_session(db)
    return report
