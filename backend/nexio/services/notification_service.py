"""
Nexio Backend — Notification Service
=====================================

What:  Inbox reads, read-state changes, and the notifications written as a
       side effect of follows, upvotes and comments.
Who:   Notification routes (inbox) and Post/User/Comment services (fan-out).

Fan-out rules:
    ┌─────────┬──────────────┬──────────────────────────────┬─────────────┐
    │ type    │ title        │ message                      │ skipped when│
    ├─────────┼──────────────┼──────────────────────────────┼─────────────┤
    │ follow  │ New Follower │ Someone started following you│ never       │
    │ upvote  │ Post Upvoted │ Someone upvoted your post    │ own post    │
    │ comment │ New Comment  │ Someone commented on your    │ own post    │
    │         │              │ post                         │             │
    └─────────┴──────────────┴──────────────────────────────┴─────────────┘
"""

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from nexio.exceptions import NotFoundError, PermissionDeniedError
from nexio.models import Notification, Post
from nexio.schemas.notification import NotificationResponse
from nexio.schemas.user import UserResponse
from nexio.services.storage import storage

logger = logging.getLogger(__name__)


class NotificationService:

    # ── Inbox ─────────────────────────────────────────────────────────────

    async def list_for_user(
        self, db: AsyncSession, user_id: str
    ) -> List[NotificationResponse]:
        """Newest first, each with the public record of who triggered it."""
        notifications = await storage.list_notifications(db, user_id)
        senders = await storage.get_users_by_ids(
            db, (n.from_user_id for n in notifications)
        )
        responses = []
        for notification in notifications:
            sender = senders.get(notification.from_user_id)
            responses.append(
                NotificationResponse.model_validate(notification).model_copy(
                    update={"from_user": UserResponse.model_validate(sender) if sender else None}
                )
            )
        return responses

    async def mark_read(self, db: AsyncSession, notification_id: str, caller_id: str) -> None:
        notification = await storage.get_notification(db, notification_id)
        if notification is None:
            raise NotFoundError(resource="notification", resource_id=notification_id)
        if notification.user_id != caller_id:
            raise PermissionDeniedError(context={"notification_id": notification_id})
        await storage.mark_notification_read(db, notification)

    async def mark_all_read(self, db: AsyncSession, caller_id: str) -> int:
        updated = await storage.mark_all_notifications_read(db, caller_id)
        logger.debug("Marked %d notification(s) read for %s", updated, caller_id)
        return updated

    # ── Fan-out ───────────────────────────────────────────────────────────

    async def notify_follow(
        self, db: AsyncSession, follower_id: str, following_id: str
    ) -> Notification:
        return await storage.create_notification(
            db,
            user_id=following_id,
            type="follow",
            title="New Follower",
            message="Someone started following you",
            from_user_id=follower_id,
        )

    async def notify_upvote(self, db: AsyncSession, post: Post, voter_id: str) -> None:
        if post.author_id == voter_id:
            return
        await storage.create_notification(
            db,
            user_id=post.author_id,
            type="upvote",
            title="Post Upvoted",
            message="Someone upvoted your post",
            from_user_id=voter_id,
            post_id=post.id,
        )

    async def notify_comment(self, db: AsyncSession, post: Post, commenter_id: str) -> None:
        if post.author_id == commenter_id:
            return
        await storage.create_notification(
            db,
            user_id=post.author_id,
            type="comment",
            title="New Comment",
            message="Someone commented on your post",
            from_user_id=commenter_id,
            post_id=post.id,
        )


notification_service = NotificationService()
