"""
Nexio Backend — Comment SQLAlchemy Model
=========================================

What:  ORM model for the `comments` table.
When:  Created by POST /api/posts/{id}/comments, removed by
       DELETE /api/comments/{id} (author only) or with the parent post.
"""

from datetime import datetime

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nexio.database import Base
from nexio.models.common import created_at_column, id_column


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[str] = id_column()
    content: Mapped[str] = mapped_column(Text, nullable=False)
    post_id: Mapped[str] = mapped_column(String(36), ForeignKey("posts.id"), nullable=False)
    author_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    created_at: Mapped[datetime] = created_at_column()

    __table_args__ = (
        Index("idx_comments_post_id", "post_id"),
    )

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, post_id={self.post_id}, author_id={self.author_id})>"
