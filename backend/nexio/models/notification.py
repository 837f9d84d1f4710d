"""
Nexio Backend — Notification SQLAlchemy Model
==============================================

What:  ORM model for the `notifications` table (a user's inbox).

Type tags written by the service layer:
    follow   — from_user_id set, post_id NULL  → client opens the profile
    upvote   — from_user_id and post_id set    → client opens the post
    comment  — from_user_id and post_id set    → client opens the post
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from nexio.database import Base
from nexio.models.common import created_at_column, id_column


class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[str] = id_column()
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    from_user_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=True
    )
    post_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("posts.id"), nullable=True
    )
    is_read: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    created_at: Mapped[datetime] = created_at_column()

    __table_args__ = (
        Index("idx_notifications_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<Notification(id={self.id}, user_id={self.user_id}, type='{self.type}')>"
