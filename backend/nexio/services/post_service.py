"""
Nexio Backend — Post Service
=============================

What:  Feed, trending, detail, profile and saved-post listings, post
       creation/editing/deletion, and upvote/save toggles.
How:   Composes Storage (rows + counters), ImageService (image rules) and
       NotificationService (upvote fan-out).
Who:   Called by the posts and users routers, and by SearchService for
       response shaping.

Response shaping (build_post_responses):
    Every post list is annotated with its author, the caller's upvote/save
    flags and its images. The annotations are fetched with one query each
    for the whole page:

        posts ──▶ get_users_by_ids(author ids)
              ──▶ upvoted_post_ids(caller, post ids)
              ──▶ saved_post_ids(caller, post ids)
              ──▶ get_images_for_posts(post ids)

    so a page of 50 posts costs five queries, not 200.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from nexio.config import settings
from nexio.exceptions import (
    DatabaseError,
    DuplicateActionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from nexio.models import Post, User
from nexio.schemas.post import (
    PostCreateRequest,
    PostImageResponse,
    PostResponse,
    PostUpdateRequest,
)
from nexio.schemas.user import UserResponse
from nexio.services.image_service import image_service
from nexio.services.notification_service import notification_service
from nexio.services.storage import storage

logger = logging.getLogger(__name__)


class PostService:
    """
    Business logic for posts and post engagement.

    Error Handling Strategy:
        Missing rows become NotFoundError; repeated toggles become
        DuplicateActionError. Unexpected SQLAlchemy errors on the write
        paths are logged and wrapped in DatabaseError so the client only
        sees a generic 500.
    """

    # ══════════════════════════════════════════════════════════════════════
    # Response shaping
    # ══════════════════════════════════════════════════════════════════════

    async def build_post_responses(
        self,
        db: AsyncSession,
        posts: List[Post],
        caller_id: Optional[str],
        include_images: bool = True,
        saved_override: Optional[bool] = None,
        upvote_user_id: Optional[str] = None,
    ) -> List[PostResponse]:
        """
        Annotate posts with author, caller flags and images.

        Args:
            posts:          Rows in the order they should be returned
            caller_id:      Identified caller, or None for anonymous requests
            include_images: Search results skip images
            saved_override: Force isSaved (the saved list is all saved)
            upvote_user_id: Compute isUpvoted for this user instead of the
                            caller (the saved list reports the list owner's)
        """
        if not posts:
            return []
        post_ids = [post.id for post in posts]
        flag_user = upvote_user_id or caller_id

        authors = await storage.get_users_by_ids(db, (post.author_id for post in posts))
        upvoted = await storage.upvoted_post_ids(db, flag_user, post_ids)
        saved = (
            set()
            if saved_override is not None
            else await storage.saved_post_ids(db, caller_id, post_ids)
        )
        images = (
            await storage.get_images_for_posts(db, post_ids) if include_images else {}
        )

        responses = []
        for post in posts:
            author = authors.get(post.author_id)
            response = PostResponse.model_validate(post).model_copy(
                update={
                    "author": UserResponse.model_validate(author) if author else None,
                    "is_upvoted": post.id in upvoted,
                    "is_saved": saved_override if saved_override is not None else post.id in saved,
                    "images": [
                        PostImageResponse.model_validate(image)
                        for image in images.get(post.id, [])
                    ],
                }
            )
            responses.append(response)
        return responses

    async def build_post_response(
        self, db: AsyncSession, post: Post, caller_id: Optional[str]
    ) -> PostResponse:
        responses = await self.build_post_responses(db, [post], caller_id)
        return responses[0]

    # ══════════════════════════════════════════════════════════════════════
    # Reads
    # ══════════════════════════════════════════════════════════════════════

    async def list_posts(
        self,
        db: AsyncSession,
        caller_id: Optional[str],
        limit: Optional[int] = None,
        offset: int = 0,
        category: Optional[str] = None,
    ) -> List[PostResponse]:
        posts = await storage.list_posts(db, limit=limit, offset=offset, category=category)
        return await self.build_post_responses(db, posts, caller_id)

    async def list_trending(
        self, db: AsyncSession, caller_id: Optional[str]
    ) -> List[PostResponse]:
        """
        Trending: the newest page of posts re-sorted by upvotes, highest
        first. Ties keep their newest-first order (sorted() is stable).
        """
        posts = await storage.list_posts(db, limit=settings.trending_page_size)
        ranked = sorted(posts, key=lambda post: post.upvotes_count, reverse=True)
        return await self.build_post_responses(db, ranked, caller_id)

    async def get_post(
        self, db: AsyncSession, post_id: str, caller_id: Optional[str]
    ) -> PostResponse:
        post = await self.require_post(db, post_id)
        return await self.build_post_response(db, post, caller_id)

    async def list_user_posts(
        self, db: AsyncSession, user_id: str, caller_id: Optional[str]
    ) -> List[PostResponse]:
        posts = await storage.list_posts_by_author(db, user_id)
        return await self.build_post_responses(db, posts, caller_id)

    async def list_saved_posts(
        self, db: AsyncSession, user_id: str
    ) -> List[PostResponse]:
        """A user's saved posts: isSaved is always true, isUpvoted is theirs."""
        posts = await storage.list_saved_posts(db, user_id)
        return await self.build_post_responses(
            db, posts, caller_id=None, saved_override=True, upvote_user_id=user_id
        )

    async def require_post(self, db: AsyncSession, post_id: str) -> Post:
        post = await storage.get_post(db, post_id)
        if post is None:
            raise NotFoundError(resource="post", resource_id=post_id)
        return post

    # ══════════════════════════════════════════════════════════════════════
    # Writes
    # ══════════════════════════════════════════════════════════════════════

    async def create_post(
        self, db: AsyncSession, payload: PostCreateRequest
    ) -> PostResponse:
        """
        Create a post and its images.

        Workflow:
            1. Presence checks (title, content, category, authorId)
            2. Image rules (count, type, size), nothing written yet
            3. Author must exist
            4. Insert post (+1 author posts_count), then image rows

        Raises:
            ValidationError: missing fields or a rejected image
            NotFoundError:   authorId does not name a user
            DatabaseError:   insert failed
        """
        if not (payload.title and payload.content and payload.category and payload.author_id):
            raise ValidationError(
                message="Title, content, category, and authorId are required"
            )
        image_urls = image_service.validate_images(payload.images)

        if await storage.get_user(db, payload.author_id) is None:
            raise NotFoundError(resource="user", resource_id=payload.author_id)

        try:
            post = await storage.create_post(
                db,
                title=payload.title,
                content=payload.content,
                category=payload.category,
                author_id=payload.author_id,
                tags=payload.tags or None,
                cover_image_url=payload.cover_image_url or None,
            )
            await storage.create_post_images(db, post.id, image_urls)
        except SQLAlchemyError as e:
            logger.error("Failed to create post: %s", str(e), exc_info=True)
            raise DatabaseError(context={"original_error": type(e).__name__})

        logger.info(
            "Post %s created by %s with %d image(s)", post.id, post.author_id, len(image_urls)
        )
        return await self.build_post_response(db, post, payload.author_id)

    async def update_post(
        self,
        db: AsyncSession,
        post_id: str,
        caller_id: str,
        payload: PostUpdateRequest,
    ) -> PostResponse:
        post = await self.require_post(db, post_id)
        if post.author_id != caller_id:
            raise PermissionDeniedError(context={"post_id": post_id})

        fields = payload.model_dump(exclude_unset=True)
        for required in ("title", "content", "category"):
            if required in fields and not (fields[required] or "").strip():
                raise ValidationError(
                    message=f"{required.capitalize()} cannot be empty", field=required
                )
        post = await storage.update_post(db, post_id, fields)
        return await self.build_post_response(db, post, caller_id)

    async def delete_post(self, db: AsyncSession, post_id: str, caller_id: str) -> None:
        post = await self.require_post(db, post_id)
        if post.author_id != caller_id:
            raise PermissionDeniedError(context={"post_id": post_id})
        await storage.delete_post(db, post_id)

    # ── Engagement ────────────────────────────────────────────────────────

    async def upvote(self, db: AsyncSession, post_id: str, caller: User) -> None:
        """
        Upvote a post as the caller.

        Side effects (same transaction):
            +1 posts.upvotes_count, +1 author reputation, and an "upvote"
            notification for the author unless they upvoted their own post.
        """
        post = await self.require_post(db, post_id)
        if await storage.has_upvoted(db, post_id, caller.id):
            raise DuplicateActionError(message="Already upvoted", action="upvote")
        await storage.create_upvote(db, post, caller.id)
        await notification_service.notify_upvote(db, post, caller.id)

    async def remove_upvote(self, db: AsyncSession, post_id: str, caller: User) -> None:
        post = await self.require_post(db, post_id)
        if not await storage.delete_upvote(db, post, caller.id):
            raise DuplicateActionError(message="Not upvoted", action="unvote")

    async def save(self, db: AsyncSession, post_id: str, caller: User) -> None:
        post = await self.require_post(db, post_id)
        if await storage.has_saved(db, post_id, caller.id):
            raise DuplicateActionError(message="Already saved", action="save")
        await storage.create_save(db, post, caller.id)

    async def unsave(self, db: AsyncSession, post_id: str, caller: User) -> None:
        post = await self.require_post(db, post_id)
        if not await storage.delete_save(db, post, caller.id):
            raise DuplicateActionError(message="Not saved", action="unsave")


# Singleton instance
post_service = PostService()
