"""
Nexio Backend — Post and PostImage SQLAlchemy Models
=====================================================

What:  ORM models for the `posts` and `post_images` tables.
Who:   Used by Storage for feed, detail, search and counter maintenance.

Counter columns on Post:
    upvotes_count  — tracks rows in `upvotes` for the post
    saves_count    — tracks rows in `saves`
    comments_count — tracks rows in `comments`
    Each request that changes an association row updates the counter in the
    same transaction.

Query Patterns:
    - Feed: ORDER BY created_at DESC LIMIT :limit OFFSET :offset
      → idx_posts_created_at
    - Profile: WHERE author_id = :id ORDER BY created_at DESC
      → idx_posts_author_id
    - Explore: WHERE category = :category → idx_posts_category
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from nexio.database import Base
from nexio.models.common import created_at_column, id_column


class Post(Base):
    """An article published by a user."""

    __tablename__ = "posts"

    id: Mapped[str] = id_column()
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False)

    # Free-form, comma separated as typed by the author
    tags: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cover_image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    author_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False
    )

    upvotes_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )
    saves_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )
    comments_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )

    created_at: Mapped[datetime] = created_at_column()

    __table_args__ = (
        Index("idx_posts_created_at", "created_at"),
        Index("idx_posts_author_id", "author_id"),
        Index("idx_posts_category", "category"),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}', author_id={self.author_id})>"


class PostImage(Base):
    """
    An image attached to a post.

    image_url holds either a data URL (uploaded from the app) or a remote URL.
    Images are read back ordered by (position, created_at); position is the
    index within the request that attached them, so a post keeps its order
    even when every row gets the same timestamp.
    """

    __tablename__ = "post_images"

    id: Mapped[str] = id_column()
    post_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("posts.id"), nullable=False
    )
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )
    created_at: Mapped[datetime] = created_at_column()

    __table_args__ = (
        Index("idx_post_images_post_id", "post_id"),
    )

    def __repr__(self) -> str:
        return f"<PostImage(id={self.id}, post_id={self.post_id}, position={self.position})>"
