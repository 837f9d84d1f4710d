"""
Nexio Backend — User SQLAlchemy Model
======================================

What:  ORM model for the `users` table.
Who:   Used by Storage for account, profile, counter and search operations.

Table Design:
    - email: UNIQUE at the store; signup also checks before insert
    - password: bcrypt hash, never serialized (schemas omit it)
    - reputation_score: +1 per upvote received, -1 (floored) per removal
    - followers_count / following_count / posts_count: denormalized counters
      kept in step with the `followers` and `posts` tables
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from nexio.database import Base
from nexio.models.common import created_at_column, id_column


class User(Base):
    """
    A registered account.

    Counters are never negative: increments are `col + 1` and decrements
    clamp at zero (see Storage._decrement).
    """

    __tablename__ = "users"

    id: Mapped[str] = id_column()
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)

    # ── Optional profile fields ───────────────────────────────────────────
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    profile_pic_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    expertise: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ── Counters ──────────────────────────────────────────────────────────
    reputation_score: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )
    followers_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )
    following_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )
    posts_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )

    is_admin: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    created_at: Mapped[datetime] = created_at_column()

    __table_args__ = (
        Index("idx_users_name", "name"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
