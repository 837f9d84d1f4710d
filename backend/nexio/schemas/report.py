"""Nexio Backend — Report Schemas"""

from datetime import datetime
from typing import Optional

from nexio.schemas.common import CamelModel


class ReportResponse(CamelModel):
    id: str
    post_id: str
    reporter_id: str
    reason: str
    status: str
    created_at: datetime


class ReportCreateRequest(CamelModel):
    post_id: Optional[str] = None
    reporter_id: Optional[str] = None
    reason: Optional[str] = None


class ReportUpdateRequest(CamelModel):
    """Moderation: move a report to reviewed, resolved or dismissed."""
    status: Optional[str] = None
