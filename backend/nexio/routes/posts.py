"""
Nexio Backend — Post Routes
============================

What:  Feed, trending, detail, create/edit/delete, and upvote/save toggles.
How:   Thin handlers; PostService does the work. Read endpoints accept an
       optional caller so isUpvoted/isSaved can be filled in; toggles need
       a known caller.

Route order matters: /posts/trending is registered before /posts/{post_id}
so "trending" is never treated as an id.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from nexio.database import commit_session, get_db_session
from nexio.models import User
from nexio.routes.deps import get_caller_id, require_caller, require_caller_id
from nexio.schemas.common import ErrorResponse, SuccessResponse
from nexio.schemas.comment import CommentCreateRequest, CommentResponse
from nexio.schemas.post import PostCreateRequest, PostResponse, PostUpdateRequest
from nexio.services.comment_service import comment_service
from nexio.services.post_service import post_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/posts", tags=["Posts"])

TOGGLE_RESPONSES = {
    400: {"description": "Toggle already applied", "model": ErrorResponse},
    401: {"description": "No caller identity", "model": ErrorResponse},
    404: {"description": "Post not found", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=List[PostResponse],
    summary="List posts, newest first",
)
async def list_posts(
    category: str | None = Query(default=None, description="Only posts in this category"),
    limit: int | None = Query(default=None, ge=1, le=200, description="Page size (default 50)"),
    offset: int = Query(default=0, ge=0),
    caller_id: Optional[str] = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db_session),
) -> List[PostResponse]:
    return await post_service.list_posts(
        db, caller_id, limit=limit, offset=offset, category=category
    )


@router.get(
    "/trending",
    response_model=List[PostResponse],
    summary="Trending posts",
    description="The 20 newest posts ordered by upvotes, highest first.",
)
async def list_trending(
    caller_id: Optional[str] = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db_session),
) -> List[PostResponse]:
    return await post_service.list_trending(db, caller_id)


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    responses={404: {"description": "Post not found", "model": ErrorResponse}},
    summary="Get a post",
)
async def get_post(
    post_id: str,
    caller_id: Optional[str] = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    return await post_service.get_post(db, post_id, caller_id)


@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing fields or rejected image", "model": ErrorResponse},
        404: {"description": "Author not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a post",
    description=(
        "Creates a post with up to 5 images. Images are data URLs "
        "(jpeg, jpg, png or gif), at most 5MB each."
    ),
)
async def create_post(
    payload: PostCreateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    post = await post_service.create_post(db, payload)
    await commit_session(db)
    return post


@router.patch(
    "/{post_id}",
    response_model=PostResponse,
    responses={
        401: {"description": "No caller identity", "model": ErrorResponse},
        403: {"description": "Not the author", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Edit your post",
)
async def update_post(
    post_id: str,
    payload: PostUpdateRequest,
    caller_id: str = Depends(require_caller_id),
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    post = await post_service.update_post(db, post_id, caller_id, payload)
    await commit_session(db)
    return post


@router.delete(
    "/{post_id}",
    response_model=SuccessResponse,
    responses={
        401: {"description": "No caller identity", "model": ErrorResponse},
        403: {"description": "Not the author", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Delete your post",
)
async def delete_post(
    post_id: str,
    caller_id: str = Depends(require_caller_id),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    await post_service.delete_post(db, post_id, caller_id)
    await commit_session(db)
    return SuccessResponse()


# ── Engagement toggles ────────────────────────────────────────────────────

@router.post("/{post_id}/upvote", response_model=SuccessResponse, responses=TOGGLE_RESPONSES)
async def upvote_post(
    post_id: str,
    caller: User = Depends(require_caller),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    await post_service.upvote(db, post_id, caller)
    await commit_session(db)
    return SuccessResponse()


@router.delete("/{post_id}/upvote", response_model=SuccessResponse, responses=TOGGLE_RESPONSES)
async def remove_upvote(
    post_id: str,
    caller: User = Depends(require_caller),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    await post_service.remove_upvote(db, post_id, caller)
    await commit_session(db)
    return SuccessResponse()


@router.post("/{post_id}/save", response_model=SuccessResponse, responses=TOGGLE_RESPONSES)
async def save_post(
    post_id: str,
    caller: User = Depends(require_caller),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    await post_service.save(db, post_id, caller)
    await commit_session(db)
    return SuccessResponse()


@router.delete("/{post_id}/save", response_model=SuccessResponse, responses=TOGGLE_RESPONSES)
async def unsave_post(
    post_id: str,
    caller: User = Depends(require_caller),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    await post_service.unsave(db, post_id, caller)
    await commit_session(db)
    return SuccessResponse()


# ── Comments on a post ────────────────────────────────────────────────────

@router.get(
    "/{post_id}/comments",
    response_model=List[CommentResponse],
    responses={404: {"description": "Post not found", "model": ErrorResponse}},
    summary="List comments, newest first",
)
async def list_comments(
    post_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[CommentResponse]:
    return await comment_service.list_for_post(db, post_id)


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Content or authorId missing", "model": ErrorResponse},
        404: {"description": "Post or author not found", "model": ErrorResponse},
    },
    summary="Comment on a post",
)
async def create_comment(
    post_id: str,
    payload: CommentCreateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> CommentResponse:
    comment = await comment_service.create(db, post_id, payload)
    await commit_session(db)
    return comment
