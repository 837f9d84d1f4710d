"""
Nexio Backend — User Schemas
=============================

UserResponse is the only shape a user row leaves the API in. It has no
password field, so a hash can never be serialized by accident.
"""

from datetime import datetime
from typing import Optional

from nexio.schemas.common import CamelModel


class UserResponse(CamelModel):
    id: str
    email: str
    name: str
    bio: Optional[str] = None
    profile_pic_url: Optional[str] = None
    expertise: Optional[str] = None
    reputation_score: int = 0
    followers_count: int = 0
    following_count: int = 0
    posts_count: int = 0
    is_admin: bool = False
    created_at: datetime


class UserProfileResponse(UserResponse):
    """GET /api/users/{id}: profile plus whether the caller follows them."""
    is_following: bool = False


class UserUpdateRequest(CamelModel):
    """
    Editable profile fields for PATCH /api/users/{id}.

    Omitted fields are left unchanged. Email, password, counters and the
    admin flag are not editable through this endpoint.
    """
    name: Optional[str] = None
    bio: Optional[str] = None
    expertise: Optional[str] = None
    profile_pic_url: Optional[str] = None
