"""
Nexio Backend — Post Schemas
=============================

What:  Request bodies for creating/editing posts and the annotated post shape
       returned by every feed, profile, search and detail endpoint.

Annotated post:
    The stored post columns plus
        author     — the author's public record (null if the row is gone)
        isUpvoted  — whether the caller has upvoted it (false when anonymous)
        isSaved    — whether the caller has saved it (false when anonymous)
        images     — attached images in position order
"""

from datetime import datetime
from typing import Any, List, Optional

from nexio.schemas.common import CamelModel
from nexio.schemas.user import UserResponse


class PostImageResponse(CamelModel):
    id: str
    post_id: str
    image_url: str
    position: int = 0
    created_at: datetime


class PostResponse(CamelModel):
    id: str
    title: str
    content: str
    category: str
    tags: Optional[str] = None
    cover_image_url: Optional[str] = None
    author_id: str
    upvotes_count: int = 0
    saves_count: int = 0
    comments_count: int = 0
    created_at: datetime

    author: Optional[UserResponse] = None
    is_upvoted: bool = False
    is_saved: bool = False
    images: List[PostImageResponse] = []


class PostCreateRequest(CamelModel):
    """
    Body of POST /api/posts.

    images is typed loosely (List[Any]) so a non-string entry reaches
    ImageService and gets the "Invalid image format" message rather than a
    generic type error.
    """
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[str] = None
    author_id: Optional[str] = None
    cover_image_url: Optional[str] = None
    images: Optional[List[Any]] = None


class PostUpdateRequest(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[str] = None
    cover_image_url: Optional[str] = None
