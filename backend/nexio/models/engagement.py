"""
Nexio Backend — Engagement Join Tables
=======================================

What:  ORM models for `upvotes`, `saves` and `followers`.

Uniqueness:
    (post_id, user_id) is UNIQUE on upvotes and saves, and
    (follower_id, following_id) is UNIQUE on followers. The service layer
    checks existence first; two concurrent identical requests that both pass
    the check collide on the constraint, and Storage reports the loser as a
    DuplicateActionError.
"""

from datetime import datetime

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from nexio.database import Base
from nexio.models.common import created_at_column, id_column


class Upvote(Base):
    __tablename__ = "upvotes"

    id: Mapped[str] = id_column()
    post_id: Mapped[str] = mapped_column(String(36), ForeignKey("posts.id"), nullable=False)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    created_at: Mapped[datetime] = created_at_column()

    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_upvotes_post_user"),
        Index("idx_upvotes_user_id", "user_id"),
    )


class Save(Base):
    __tablename__ = "saves"

    id: Mapped[str] = id_column()
    post_id: Mapped[str] = mapped_column(String(36), ForeignKey("posts.id"), nullable=False)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    created_at: Mapped[datetime] = created_at_column()

    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_saves_post_user"),
        Index("idx_saves_user_id", "user_id"),
    )


class Follower(Base):
    """Directed edge: `follower_id` follows `following_id`."""

    __tablename__ = "followers"

    id: Mapped[str] = id_column()
    follower_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    following_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    created_at: Mapped[datetime] = created_at_column()

    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_followers_pair"),
        Index("idx_followers_following_id", "following_id"),
    )
