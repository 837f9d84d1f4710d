"""
Nexio Backend — User Routes
============================

    GET    /api/users/{id}             profile + isFollowing
    PATCH  /api/users/{id}             edit name/bio/expertise/profilePicUrl
    DELETE /api/users/{id}             delete own account
    GET    /api/users/{id}/posts       the user's posts, annotated for the caller
    GET    /api/users/{id}/saved       posts the user saved
    GET    /api/users/{id}/followers   who follows the user
    GET    /api/users/{id}/following   who the user follows
    POST   /api/users/{id}/follow      follow (caller → id)
    DELETE /api/users/{id}/follow      unfollow
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nexio.database import commit_session, get_db_session
from nexio.models import User
from nexio.routes.deps import get_caller_id, require_caller, require_caller_id
from nexio.schemas.common import ErrorResponse, SuccessResponse
from nexio.schemas.post import PostResponse
from nexio.schemas.user import UserProfileResponse, UserResponse, UserUpdateRequest
from nexio.services.post_service import post_service
from nexio.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])

NOT_FOUND = {404: {"description": "User not found", "model": ErrorResponse}}


@router.get(
    "/{user_id}",
    response_model=UserProfileResponse,
    responses=NOT_FOUND,
    summary="Get a user's profile",
)
async def get_user(
    user_id: str,
    caller_id: Optional[str] = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db_session),
) -> UserProfileResponse:
    return await user_service.get_profile(db, user_id, caller_id)


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    responses=NOT_FOUND,
    summary="Update profile fields",
    description="Only name, bio, expertise and profilePicUrl can be changed; omitted fields are kept.",
)
async def update_user(
    user_id: str,
    payload: UserUpdateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user = await user_service.update_profile(db, user_id, payload)
    await commit_session(db)
    return user


@router.delete(
    "/{user_id}",
    response_model=SuccessResponse,
    responses={
        401: {"description": "No caller identity", "model": ErrorResponse},
        403: {"description": "Not your account", "model": ErrorResponse},
        **NOT_FOUND,
    },
    summary="Delete your account and everything it owns",
)
async def delete_user(
    user_id: str,
    caller_id: str = Depends(require_caller_id),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    await user_service.delete_account(db, user_id, caller_id)
    await commit_session(db)
    return SuccessResponse()


@router.get("/{user_id}/posts", response_model=List[PostResponse], summary="List a user's posts")
async def list_user_posts(
    user_id: str,
    caller_id: Optional[str] = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db_session),
) -> List[PostResponse]:
    return await post_service.list_user_posts(db, user_id, caller_id)


@router.get("/{user_id}/saved", response_model=List[PostResponse], summary="List a user's saved posts")
async def list_saved_posts(
    user_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[PostResponse]:
    return await post_service.list_saved_posts(db, user_id)


@router.get(
    "/{user_id}/followers",
    response_model=List[UserResponse],
    responses=NOT_FOUND,
    summary="List followers",
)
async def list_followers(
    user_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[UserResponse]:
    return await user_service.list_followers(db, user_id)


@router.get(
    "/{user_id}/following",
    response_model=List[UserResponse],
    responses=NOT_FOUND,
    summary="List followed users",
)
async def list_following(
    user_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[UserResponse]:
    return await user_service.list_following(db, user_id)


@router.post(
    "/{user_id}/follow",
    response_model=SuccessResponse,
    responses={
        400: {"description": "Self-follow or already following", "model": ErrorResponse},
        401: {"description": "No caller identity", "model": ErrorResponse},
        **NOT_FOUND,
    },
    summary="Follow a user",
)
async def follow_user(
    user_id: str,
    caller: User = Depends(require_caller),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    await user_service.follow(db, user_id, caller)
    await commit_session(db)
    return SuccessResponse()


@router.delete(
    "/{user_id}/follow",
    response_model=SuccessResponse,
    responses={
        400: {"description": "Not following", "model": ErrorResponse},
        401: {"description": "No caller identity", "model": ErrorResponse},
        **NOT_FOUND,
    },
    summary="Unfollow a user",
)
async def unfollow_user(
    user_id: str,
    caller: User = Depends(require_caller),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    await user_service.unfollow(db, user_id, caller)
    await commit_session(db)
    return SuccessResponse()
