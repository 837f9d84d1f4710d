"""
Nexio Backend — Storage Access Layer
=====================================

What:  One object exposing CRUD and counter-mutation operations per entity.
How:   Every method takes the request's AsyncSession, issues its statements,
       and flushes. Nothing here commits; `get_db_session` commits once per
       request, so an association insert and its counter updates land in the
       same transaction.
Who:   Called by the services in this package. Routes never call it directly.

Counter maintenance:
    increment:  SET col = col + 1
    decrement:  SET col = CASE WHEN col > 0 THEN col - 1 ELSE 0 END

    Counter statements leave rows already loaded in the session untouched;
    get_user, get_users_by_ids and get_post reload from the database.

    ┌───────────────┬──────────────────────────────────────────────────────┐
    │ create_upvote │ +1 posts.upvotes_count, +1 author users.reputation   │
    │ delete_upvote │ -1 posts.upvotes_count, -1 author users.reputation   │
    │ create_save   │ +1 posts.saves_count                                 │
    │ delete_save   │ -1 posts.saves_count                                 │
    │ create_follow │ +1 follower.following_count, +1 followee.followers   │
    │ delete_follow │ -1 follower.following_count, -1 followee.followers   │
    │ create_post   │ +1 author users.posts_count                          │
    │ delete_post   │ -1 author users.posts_count                          │
    │ create_comment│ +1 posts.comments_count                              │
    │ delete_comment│ -1 posts.comments_count                              │
    └───────────────┴──────────────────────────────────────────────────────┘

Duplicate engagement:
    Callers check `has_upvoted` / `has_saved` / `is_following` first. The
    unique constraints catch a concurrent duplicate; `_insert_unique` turns the
    IntegrityError into DuplicateActionError after rolling the request back.
"""

import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Type

from sqlalchemy import case, delete, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from nexio.config import settings
from nexio.database import Base
from nexio.exceptions import DuplicateActionError, ValidationError
from nexio.models import (
    Comment,
    Follower,
    Notification,
    Post,
    PostImage,
    Report,
    Save,
    Upvote,
    User,
)

logger = logging.getLogger(__name__)


def _contains(value: str) -> str:
    """LIKE pattern for a case-insensitive substring match."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class Storage:
    """
    Data access for every Nexio entity.

    Methods return ORM rows (or None / bool / collections of rows) and raise
    on store failures. Business rules (presence checks, who may do what,
    notification fan-out) live in the services.
    """

    # ══════════════════════════════════════════════════════════════════════
    # Counter helpers
    # ══════════════════════════════════════════════════════════════════════

    async def _increment(
        self, db: AsyncSession, model: Type[Base], column: str, row_id: str
    ) -> None:
        col = getattr(model, column)
        await db.execute(
            update(model)
            .where(model.id == row_id)
            .values({column: col + 1})
            .execution_options(synchronize_session=False)
        )

    async def _decrement(
        self, db: AsyncSession, model: Type[Base], column: str, row_id: str
    ) -> None:
        col = getattr(model, column)
        await db.execute(
            update(model)
            .where(model.id == row_id)
            .values({column: case((col > 0, col - 1), else_=0)})
            .execution_options(synchronize_session=False)
        )

    async def _insert_unique(
        self, db: AsyncSession, row: Base, action: str, message: str
    ) -> None:
        db.add(row)
        try:
            await db.flush()
        except IntegrityError as e:
            # Lost a race against an identical request
            await db.rollback()
            logger.info("Duplicate %s rejected by unique constraint", action)
            raise DuplicateActionError(message=message, action=action) from e

    # ══════════════════════════════════════════════════════════════════════
    # Users
    # ══════════════════════════════════════════════════════════════════════

    async def get_user(self, db: AsyncSession, user_id: str) -> Optional[User]:
        result = await db.execute(
            select(User).where(User.id == user_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_user_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_users_by_ids(
        self, db: AsyncSession, user_ids: Iterable[str]
    ) -> Dict[str, User]:
        ids = {uid for uid in user_ids if uid}
        if not ids:
            return {}
        result = await db.execute(
            select(User).where(User.id.in_(ids)).execution_options(populate_existing=True)
        )
        return {user.id: user for user in result.scalars().all()}

    async def create_user(
        self, db: AsyncSession, name: str, email: str, password_hash: str
    ) -> User:
        user = User(name=name, email=email, password=password_hash)
        db.add(user)
        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            raise ValidationError(message="Email already in use", field="email") from e
        return user

    async def update_user(
        self, db: AsyncSession, user_id: str, fields: Dict[str, Any]
    ) -> Optional[User]:
        user = await self.get_user(db, user_id)
        if user is None:
            return None
        for key, value in fields.items():
            setattr(user, key, value)
        await db.flush()
        return user

    async def delete_user(self, db: AsyncSession, user_id: str) -> bool:
        """
        Delete an account and everything it authored or touched.

        Engagement rows go through the same delete paths as the API so the
        counters on other users' posts and profiles are decremented.
        """
        user = await self.get_user(db, user_id)
        if user is None:
            return False

        for post in await self.list_posts_by_author(db, user_id):
            await self.delete_post(db, post.id)

        upvoted = await db.execute(
            select(Post).join(Upvote, Upvote.post_id == Post.id).where(Upvote.user_id == user_id)
        )
        for post in upvoted.scalars().all():
            await self.delete_upvote(db, post, user_id)
        for post in await self.list_saved_posts(db, user_id):
            await self.delete_save(db, post, user_id)

        for followee in await self.get_following(db, user_id):
            await self.delete_follow(db, user_id, followee.id)
        for follower in await self.get_followers(db, user_id):
            await self.delete_follow(db, follower.id, user_id)

        comments = await db.execute(select(Comment).where(Comment.author_id == user_id))
        for comment in comments.scalars().all():
            await self.delete_comment(db, comment)

        await db.execute(
            delete(Notification)
            .where(or_(Notification.user_id == user_id, Notification.from_user_id == user_id))
            .execution_options(synchronize_session=False)
        )
        await db.execute(
            delete(Report)
            .where(Report.reporter_id == user_id)
            .execution_options(synchronize_session=False)
        )
        await db.delete(user)
        await db.flush()
        logger.info("User %s deleted", user_id)
        return True

    async def search_users(
        self, db: AsyncSession, query: str, limit: Optional[int] = None
    ) -> List[User]:
        pattern = _contains(query)
        result = await db.execute(
            select(User)
            .where(or_(User.name.ilike(pattern, escape="\\"), User.email.ilike(pattern, escape="\\")))
            .order_by(User.name)
            .limit(limit or settings.user_search_limit)
        )
        return list(result.scalars().all())

    async def get_followers(self, db: AsyncSession, user_id: str) -> List[User]:
        result = await db.execute(
            select(User)
            .join(Follower, Follower.follower_id == User.id)
            .where(Follower.following_id == user_id)
            .order_by(Follower.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_following(self, db: AsyncSession, user_id: str) -> List[User]:
        result = await db.execute(
            select(User)
            .join(Follower, Follower.following_id == User.id)
            .where(Follower.follower_id == user_id)
            .order_by(Follower.created_at.desc())
        )
        return list(result.scalars().all())

    # ══════════════════════════════════════════════════════════════════════
    # Posts
    # ══════════════════════════════════════════════════════════════════════

    async def list_posts(
        self,
        db: AsyncSession,
        limit: Optional[int] = None,
        offset: int = 0,
        category: Optional[str] = None,
    ) -> List[Post]:
        query = select(Post)
        if category:
            query = query.where(Post.category == category)
        query = (
            query.order_by(Post.created_at.desc(), Post.id)
            .limit(limit or settings.default_page_size)
            .offset(offset)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_post(self, db: AsyncSession, post_id: str) -> Optional[Post]:
        result = await db.execute(
            select(Post).where(Post.id == post_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_posts_by_author(self, db: AsyncSession, author_id: str) -> List[Post]:
        result = await db.execute(
            select(Post)
            .where(Post.author_id == author_id)
            .order_by(Post.created_at.desc(), Post.id)
        )
        return list(result.scalars().all())

    async def search_posts(self, db: AsyncSession, query: str) -> List[Post]:
        pattern = _contains(query)
        result = await db.execute(
            select(Post)
            .where(
                or_(
                    Post.title.ilike(pattern, escape="\\"),
                    Post.content.ilike(pattern, escape="\\"),
                    Post.tags.ilike(pattern, escape="\\"),
                )
            )
            .order_by(Post.created_at.desc(), Post.id)
        )
        return list(result.scalars().all())

    async def create_post(
        self,
        db: AsyncSession,
        title: str,
        content: str,
        category: str,
        author_id: str,
        tags: Optional[str] = None,
        cover_image_url: Optional[str] = None,
    ) -> Post:
        post = Post(
            title=title,
            content=content,
            category=category,
            tags=tags,
            cover_image_url=cover_image_url,
            author_id=author_id,
        )
        db.add(post)
        await db.flush()
        await self._increment(db, User, "posts_count", author_id)
        return post

    async def update_post(
        self, db: AsyncSession, post_id: str, fields: Dict[str, Any]
    ) -> Optional[Post]:
        post = await self.get_post(db, post_id)
        if post is None:
            return None
        for key, value in fields.items():
            setattr(post, key, value)
        await db.flush()
        return post

    async def delete_post(self, db: AsyncSession, post_id: str) -> bool:
        """
        Delete a post and every row that points at it.

        Order: comments, upvotes, saves, images, notifications, reports, the
        post itself, then the author's post counter.
        """
        post = await self.get_post(db, post_id)
        if post is None:
            return False
        author_id = post.author_id

        for model in (Comment, Upvote, Save, PostImage, Notification, Report):
            await db.execute(
                delete(model)
                .where(model.post_id == post_id)
                .execution_options(synchronize_session=False)
            )
        await db.delete(post)
        await db.flush()
        await self._decrement(db, User, "posts_count", author_id)
        logger.info("Post %s deleted with its comments, engagement and images", post_id)
        return True

    # ── Images ────────────────────────────────────────────────────────────

    async def get_post_images(self, db: AsyncSession, post_id: str) -> List[PostImage]:
        result = await db.execute(
            select(PostImage)
            .where(PostImage.post_id == post_id)
            .order_by(PostImage.position, PostImage.created_at)
        )
        return list(result.scalars().all())

    async def get_images_for_posts(
        self, db: AsyncSession, post_ids: Sequence[str]
    ) -> Dict[str, List[PostImage]]:
        grouped: Dict[str, List[PostImage]] = defaultdict(list)
        if not post_ids:
            return grouped
        result = await db.execute(
            select(PostImage)
            .where(PostImage.post_id.in_(post_ids))
            .order_by(PostImage.position, PostImage.created_at)
        )
        for image in result.scalars().all():
            grouped[image.post_id].append(image)
        return grouped

    async def create_post_images(
        self, db: AsyncSession, post_id: str, image_urls: Sequence[str]
    ) -> List[PostImage]:
        if not image_urls:
            return []
        images = [
            PostImage(post_id=post_id, image_url=url, position=index)
            for index, url in enumerate(image_urls)
        ]
        db.add_all(images)
        await db.flush()
        return images

    async def delete_post_images(self, db: AsyncSession, post_id: str) -> None:
        await db.execute(
            delete(PostImage)
            .where(PostImage.post_id == post_id)
            .execution_options(synchronize_session=False)
        )

    # ══════════════════════════════════════════════════════════════════════
    # Comments
    # ══════════════════════════════════════════════════════════════════════

    async def list_comments(self, db: AsyncSession, post_id: str) -> List[Comment]:
        result = await db.execute(
            select(Comment)
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at.desc(), Comment.id)
        )
        return list(result.scalars().all())

    async def get_comment(self, db: AsyncSession, comment_id: str) -> Optional[Comment]:
        result = await db.execute(select(Comment).where(Comment.id == comment_id))
        return result.scalar_one_or_none()

    async def create_comment(
        self, db: AsyncSession, post_id: str, author_id: str, content: str
    ) -> Comment:
        comment = Comment(post_id=post_id, author_id=author_id, content=content)
        db.add(comment)
        await db.flush()
        await self._increment(db, Post, "comments_count", post_id)
        return comment

    async def delete_comment(self, db: AsyncSession, comment: Comment) -> None:
        post_id = comment.post_id
        await db.delete(comment)
        await db.flush()
        await self._decrement(db, Post, "comments_count", post_id)

    # ══════════════════════════════════════════════════════════════════════
    # Upvotes
    # ══════════════════════════════════════════════════════════════════════

    async def has_upvoted(self, db: AsyncSession, post_id: str, user_id: str) -> bool:
        result = await db.execute(
            select(Upvote.id).where(Upvote.post_id == post_id, Upvote.user_id == user_id)
        )
        return result.first() is not None

    async def upvoted_post_ids(
        self, db: AsyncSession, user_id: Optional[str], post_ids: Sequence[str]
    ) -> Set[str]:
        if not user_id or not post_ids:
            return set()
        result = await db.execute(
            select(Upvote.post_id).where(
                Upvote.user_id == user_id, Upvote.post_id.in_(post_ids)
            )
        )
        return set(result.scalars().all())

    async def create_upvote(self, db: AsyncSession, post: Post, user_id: str) -> Upvote:
        upvote = Upvote(post_id=post.id, user_id=user_id)
        await self._insert_unique(db, upvote, "upvote", "Already upvoted")
        await self._increment(db, Post, "upvotes_count", post.id)
        await self._increment(db, User, "reputation_score", post.author_id)
        return upvote

    async def delete_upvote(self, db: AsyncSession, post: Post, user_id: str) -> bool:
        result = await db.execute(
            delete(Upvote)
            .where(Upvote.post_id == post.id, Upvote.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        if not result.rowcount:
            return False
        await self._decrement(db, Post, "upvotes_count", post.id)
        await self._decrement(db, User, "reputation_score", post.author_id)
        return True

    # ══════════════════════════════════════════════════════════════════════
    # Saves
    # ══════════════════════════════════════════════════════════════════════

    async def has_saved(self, db: AsyncSession, post_id: str, user_id: str) -> bool:
        result = await db.execute(
            select(Save.id).where(Save.post_id == post_id, Save.user_id == user_id)
        )
        return result.first() is not None

    async def saved_post_ids(
        self, db: AsyncSession, user_id: Optional[str], post_ids: Sequence[str]
    ) -> Set[str]:
        if not user_id or not post_ids:
            return set()
        result = await db.execute(
            select(Save.post_id).where(Save.user_id == user_id, Save.post_id.in_(post_ids))
        )
        return set(result.scalars().all())

    async def create_save(self, db: AsyncSession, post: Post, user_id: str) -> Save:
        save = Save(post_id=post.id, user_id=user_id)
        await self._insert_unique(db, save, "save", "Already saved")
        await self._increment(db, Post, "saves_count", post.id)
        return save

    async def delete_save(self, db: AsyncSession, post: Post, user_id: str) -> bool:
        result = await db.execute(
            delete(Save)
            .where(Save.post_id == post.id, Save.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        if not result.rowcount:
            return False
        await self._decrement(db, Post, "saves_count", post.id)
        return True

    async def list_saved_posts(self, db: AsyncSession, user_id: str) -> List[Post]:
        result = await db.execute(
            select(Post)
            .join(Save, Save.post_id == Post.id)
            .where(Save.user_id == user_id)
            .order_by(Post.created_at.desc(), Post.id)
        )
        return list(result.scalars().all())

    # ══════════════════════════════════════════════════════════════════════
    # Follows
    # ══════════════════════════════════════════════════════════════════════

    async def is_following(
        self, db: AsyncSession, follower_id: str, following_id: str
    ) -> bool:
        result = await db.execute(
            select(Follower.id).where(
                Follower.follower_id == follower_id,
                Follower.following_id == following_id,
            )
        )
        return result.first() is not None

    async def create_follow(
        self, db: AsyncSession, follower_id: str, following_id: str
    ) -> Follower:
        edge = Follower(follower_id=follower_id, following_id=following_id)
        await self._insert_unique(db, edge, "follow", "Already following")
        await self._increment(db, User, "following_count", follower_id)
        await self._increment(db, User, "followers_count", following_id)
        return edge

    async def delete_follow(
        self, db: AsyncSession, follower_id: str, following_id: str
    ) -> bool:
        result = await db.execute(
            delete(Follower)
            .where(
                Follower.follower_id == follower_id,
                Follower.following_id == following_id,
            )
            .execution_options(synchronize_session=False)
        )
        if not result.rowcount:
            return False
        await self._decrement(db, User, "following_count", follower_id)
        await self._decrement(db, User, "followers_count", following_id)
        return True

    # ══════════════════════════════════════════════════════════════════════
    # Notifications
    # ══════════════════════════════════════════════════════════════════════

    async def list_notifications(self, db: AsyncSession, user_id: str) -> List[Notification]:
        result = await db.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id)
        )
        return list(result.scalars().all())

    async def get_notification(
        self, db: AsyncSession, notification_id: str
    ) -> Optional[Notification]:
        result = await db.execute(
            select(Notification).where(Notification.id == notification_id)
        )
        return result.scalar_one_or_none()

    async def create_notification(
        self,
        db: AsyncSession,
        user_id: str,
        type: str,
        title: str,
        message: str,
        from_user_id: Optional[str] = None,
        post_id: Optional[str] = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            from_user_id=from_user_id,
            post_id=post_id,
        )
        db.add(notification)
        await db.flush()
        return notification

    async def mark_notification_read(
        self, db: AsyncSession, notification: Notification
    ) -> None:
        notification.is_read = True
        await db.flush()

    async def mark_all_notifications_read(self, db: AsyncSession, user_id: str) -> int:
        result = await db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    # ══════════════════════════════════════════════════════════════════════
    # Reports
    # ══════════════════════════════════════════════════════════════════════

    async def list_reports(
        self, db: AsyncSession, status: Optional[str] = None
    ) -> List[Report]:
        query = select(Report)
        if status:
            query = query.where(Report.status == status)
        result = await db.execute(query.order_by(Report.created_at.desc(), Report.id))
        return list(result.scalars().all())

    async def get_report(self, db: AsyncSession, report_id: str) -> Optional[Report]:
        result = await db.execute(select(Report).where(Report.id == report_id))
        return result.scalar_one_or_none()

    async def create_report(
        self, db: AsyncSession, post_id: str, reporter_id: str, reason: str
    ) -> Report:
        report = Report(post_id=post_id, reporter_id=reporter_id, reason=reason)
        db.add(report)
        await db.flush()
        return report

    async def update_report_status(
        self, db: AsyncSession, report: Report, status: str
    ) -> Report:
        report.status = status
        await db.flush()
        return report


# ── Singleton Instance ────────────────────────────────────────────────────
# Stateless; every call receives its session
storage = Storage()
