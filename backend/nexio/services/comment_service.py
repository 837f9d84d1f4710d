"""
Nexio Backend — Comment Service
================================

What:  List, create and delete comments on a post.
How:   Creation bumps the post's comment counter and notifies the post
       author (unless they commented on their own post). Deletion is
       author-only and decrements the counter by exactly one.
"""

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from nexio.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from nexio.schemas.comment import CommentCreateRequest, CommentResponse
from nexio.schemas.user import UserResponse
from nexio.services.notification_service import notification_service
from nexio.services.storage import storage

logger = logging.getLogger(__name__)


class CommentService:

    async def list_for_post(self, db: AsyncSession, post_id: str) -> List[CommentResponse]:
        if await storage.get_post(db, post_id) is None:
            raise NotFoundError(resource="post", resource_id=post_id)

        comments = await storage.list_comments(db, post_id)
        authors = await storage.get_users_by_ids(db, (c.author_id for c in comments))
        responses = []
        for comment in comments:
            author = authors.get(comment.author_id)
            responses.append(
                CommentResponse.model_validate(comment).model_copy(
                    update={"author": UserResponse.model_validate(author) if author else None}
                )
            )
        return responses

    async def create(
        self, db: AsyncSession, post_id: str, payload: CommentCreateRequest
    ) -> CommentResponse:
        """
        Raises:
            ValidationError: content or authorId missing
            NotFoundError:   unknown post or author
        """
        if not (payload.content and payload.author_id):
            raise ValidationError(message="Content and authorId are required")

        post = await storage.get_post(db, post_id)
        if post is None:
            raise NotFoundError(resource="post", resource_id=post_id)
        author = await storage.get_user(db, payload.author_id)
        if author is None:
            raise NotFoundError(resource="user", resource_id=payload.author_id)

        comment = await storage.create_comment(db, post_id, author.id, payload.content)
        await notification_service.notify_comment(db, post, author.id)
        logger.info("Comment %s added to post %s", comment.id, post_id)

        return CommentResponse.model_validate(comment).model_copy(
            update={"author": UserResponse.model_validate(author)}
        )

    async def delete(self, db: AsyncSession, comment_id: str, caller_id: str) -> None:
        comment = await storage.get_comment(db, comment_id)
        if comment is None:
            raise NotFoundError(resource="comment", resource_id=comment_id)
        if comment.author_id != caller_id:
            raise PermissionDeniedError(context={"comment_id": comment_id})
        await storage.delete_comment(db, comment)


comment_service = CommentService()
