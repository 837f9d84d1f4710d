"""
Nexio Backend — Report Service
===============================

What:  Filing reports against posts and the admin moderation queue.
Who:   Any user may file a report; only users with is_admin may list
       reports or change their status.
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from nexio.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from nexio.models import REPORT_STATUSES, User
from nexio.schemas.report import ReportCreateRequest, ReportResponse, ReportUpdateRequest
from nexio.services.storage import storage

logger = logging.getLogger(__name__)


class ReportService:

    async def create(self, db: AsyncSession, payload: ReportCreateRequest) -> ReportResponse:
        if not (payload.post_id and payload.reporter_id and payload.reason):
            raise ValidationError(message="PostId, reporterId, and reason are required")
        if await storage.get_post(db, payload.post_id) is None:
            raise NotFoundError(resource="post", resource_id=payload.post_id)
        if await storage.get_user(db, payload.reporter_id) is None:
            raise NotFoundError(resource="user", resource_id=payload.reporter_id)

        report = await storage.create_report(
            db, payload.post_id, payload.reporter_id, payload.reason
        )
        logger.info("Report %s filed against post %s", report.id, payload.post_id)
        return ReportResponse.model_validate(report)

    async def list_reports(
        self, db: AsyncSession, caller: User, status: Optional[str] = None
    ) -> List[ReportResponse]:
        self._require_admin(caller)
        if status is not None:
            self._validate_status(status)
        return [ReportResponse.model_validate(r) for r in await storage.list_reports(db, status)]

    async def update_status(
        self, db: AsyncSession, report_id: str, caller: User, payload: ReportUpdateRequest
    ) -> ReportResponse:
        self._require_admin(caller)
        if not payload.status:
            raise ValidationError(message="Status is required", field="status")
        self._validate_status(payload.status)

        report = await storage.get_report(db, report_id)
        if report is None:
            raise NotFoundError(resource="report", resource_id=report_id)
        report = await storage.update_report_status(db, report, payload.status)
        logger.info("Report %s marked %s by %s", report_id, payload.status, caller.id)
        return ReportResponse.model_validate(report)

    def _require_admin(self, caller: User) -> None:
        if not caller.is_admin:
            raise PermissionDeniedError(context={"required": "admin"})

    def _validate_status(self, status: str) -> None:
        if status not in REPORT_STATUSES:
            raise ValidationError(
                message=f"Invalid status '{status}'. Must be one of: {', '.join(REPORT_STATUSES)}",
                field="status",
            )


report_service = ReportService()
