"""
Nexio Backend — Report SQLAlchemy Model
========================================

What:  ORM model for the `reports` table (posts flagged for moderation).
Status values: pending (default) → reviewed | resolved | dismissed
"""

from datetime import datetime

from sqlalchemy import ForeignKey, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from nexio.database import Base
from nexio.models.common import created_at_column, id_column

REPORT_STATUSES = ("pending", "reviewed", "resolved", "dismissed")


class Report(Base):
    __tablename__ = "reports"

    id: Mapped[str] = id_column()
    post_id: Mapped[str] = mapped_column(String(36), ForeignKey("posts.id"), nullable=False)
    reporter_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        Text, nullable=False, default="pending", server_default=text("'pending'")
    )
    created_at: Mapped[datetime] = created_at_column()

    def __repr__(self) -> str:
        return f"<Report(id={self.id}, post_id={self.post_id}, status='{self.status}')>"
