"""
Nexio Backend — User Service
=============================

What:  Profiles, profile edits, account deletion and the follow graph.
Who:   Called by the users router.

Follow rules:
    - the caller must be a known user (401 otherwise)
    - following yourself is a 400
    - the target must exist (404)
    - following twice, or unfollowing without an edge, is a 400
    - a follow writes a "follow" notification to the followee
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from nexio.exceptions import (
    DuplicateActionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from nexio.models import User
from nexio.schemas.user import UserProfileResponse, UserResponse, UserUpdateRequest
from nexio.services.notification_service import notification_service
from nexio.services.storage import storage

logger = logging.getLogger(__name__)


class UserService:

    async def require_user(self, db: AsyncSession, user_id: str) -> User:
        user = await storage.get_user(db, user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=user_id)
        return user

    async def get_profile(
        self, db: AsyncSession, user_id: str, caller_id: Optional[str]
    ) -> UserProfileResponse:
        """Profile plus isFollowing (always false for anonymous or own profile)."""
        user = await self.require_user(db, user_id)
        is_following = False
        if caller_id and caller_id != user_id:
            is_following = await storage.is_following(db, caller_id, user_id)
        return UserProfileResponse.model_validate(user).model_copy(
            update={"is_following": is_following}
        )

    async def update_profile(
        self, db: AsyncSession, user_id: str, payload: UserUpdateRequest
    ) -> UserResponse:
        fields = payload.model_dump(exclude_unset=True)
        if "name" in fields and not (fields["name"] or "").strip():
            raise ValidationError(message="Name cannot be empty", field="name")
        user = await storage.update_user(db, user_id, fields)
        if user is None:
            raise NotFoundError(resource="user", resource_id=user_id)
        return UserResponse.model_validate(user)

    async def delete_account(self, db: AsyncSession, user_id: str, caller_id: str) -> None:
        await self.require_user(db, user_id)
        if user_id != caller_id:
            raise PermissionDeniedError(context={"user_id": user_id})
        await storage.delete_user(db, user_id)

    # ── Follow graph ──────────────────────────────────────────────────────

    async def list_followers(self, db: AsyncSession, user_id: str) -> List[UserResponse]:
        await self.require_user(db, user_id)
        return [UserResponse.model_validate(u) for u in await storage.get_followers(db, user_id)]

    async def list_following(self, db: AsyncSession, user_id: str) -> List[UserResponse]:
        await self.require_user(db, user_id)
        return [UserResponse.model_validate(u) for u in await storage.get_following(db, user_id)]

    async def follow(self, db: AsyncSession, user_id: str, caller: User) -> None:
        if caller.id == user_id:
            raise ValidationError(message="Cannot follow yourself", field="id")
        await self.require_user(db, user_id)
        if await storage.is_following(db, caller.id, user_id):
            raise DuplicateActionError(message="Already following", action="follow")

        await storage.create_follow(db, caller.id, user_id)
        await notification_service.notify_follow(db, caller.id, user_id)
        logger.info("User %s followed %s", caller.id, user_id)

    async def unfollow(self, db: AsyncSession, user_id: str, caller: User) -> None:
        if caller.id == user_id:
            raise ValidationError(message="Cannot unfollow yourself", field="id")
        await self.require_user(db, user_id)
        if not await storage.delete_follow(db, caller.id, user_id):
            raise DuplicateActionError(message="Not following", action="unfollow")


user_service = UserService()
