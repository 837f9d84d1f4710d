"""Create social schema

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates users, posts, post_images, comments, upvotes, saves,
       followers, notifications and reports.
How:   Mirrors nexio/models; ids are 36-char UUID strings generated by the
       application, counters default to 0.

Rollback: downgrade() drops every table (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.String(36), primary_key=True, nullable=False)


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.TIMESTAMP(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def _counter(name: str) -> sa.Column:
    return sa.Column(name, sa.Integer(), nullable=False, server_default=sa.text("0"))


def _fk(name: str, target: str, nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.String(36), sa.ForeignKey(target), nullable=nullable)


def upgrade() -> None:
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.Text(), nullable=False, unique=True),
        sa.Column("password", sa.Text(), nullable=False, comment="bcrypt hash"),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("profile_pic_url", sa.Text(), nullable=True),
        sa.Column("expertise", sa.Text(), nullable=True),
        _counter("reputation_score"),
        _counter("followers_count"),
        _counter("following_count"),
        _counter("posts_count"),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        _created_at(),
    )
    op.create_index("idx_users_name", "users", ["name"])

    op.create_table(
        "posts",
        _id(),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("category", sa.Text(), nullable=False),
        sa.Column("tags", sa.Text(), nullable=True),
        sa.Column("cover_image_url", sa.Text(), nullable=True),
        _fk("author_id", "users.id"),
        _counter("upvotes_count"),
        _counter("saves_count"),
        _counter("comments_count"),
        _created_at(),
    )
    # Feed query: ORDER BY created_at DESC LIMIT/OFFSET
    op.create_index("idx_posts_created_at", "posts", ["created_at"])
    op.create_index("idx_posts_author_id", "posts", ["author_id"])
    op.create_index("idx_posts_category", "posts", ["category"])

    op.create_table(
        "post_images",
        _id(),
        _fk("post_id", "posts.id"),
        sa.Column("image_url", sa.Text(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
        _created_at(),
    )
    op.create_index("idx_post_images_post_id", "post_images", ["post_id"])

    op.create_table(
        "comments",
        _id(),
        sa.Column("content", sa.Text(), nullable=False),
        _fk("post_id", "posts.id"),
        _fk("author_id", "users.id"),
        _created_at(),
    )
    op.create_index("idx_comments_post_id", "comments", ["post_id"])

    op.create_table(
        "upvotes",
        _id(),
        _fk("post_id", "posts.id"),
        _fk("user_id", "users.id"),
        _created_at(),
        sa.UniqueConstraint("post_id", "user_id", name="uq_upvotes_post_user"),
    )
    op.create_index("idx_upvotes_user_id", "upvotes", ["user_id"])

    op.create_table(
        "saves",
        _id(),
        _fk("post_id", "posts.id"),
        _fk("user_id", "users.id"),
        _created_at(),
        sa.UniqueConstraint("post_id", "user_id", name="uq_saves_post_user"),
    )
    op.create_index("idx_saves_user_id", "saves", ["user_id"])

    op.create_table(
        "followers",
        _id(),
        _fk("follower_id", "users.id"),
        _fk("following_id", "users.id"),
        _created_at(),
        sa.UniqueConstraint("follower_id", "following_id", name="uq_followers_pair"),
    )
    op.create_index("idx_followers_following_id", "followers", ["following_id"])

    op.create_table(
        "notifications",
        _id(),
        _fk("user_id", "users.id"),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        _fk("from_user_id", "users.id", nullable=True),
        _fk("post_id", "posts.id", nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        _created_at(),
    )
    op.create_index("idx_notifications_user_id", "notifications", ["user_id"])

    op.create_table(
        "reports",
        _id(),
        _fk("post_id", "posts.id"),
        _fk("reporter_id", "users.id"),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default=sa.text("'pending'")),
        _created_at(),
    )


def downgrade() -> None:
    for table in (
        "reports",
        "notifications",
        "followers",
        "saves",
        "upvotes",
        "comments",
        "post_images",
        "posts",
        "users",
    ):
        op.drop_table(table)
