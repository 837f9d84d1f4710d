"""Nexio Backend — Comment Schemas"""

from datetime import datetime
from typing import Optional

from nexio.schemas.common import CamelModel
from nexio.schemas.user import UserResponse


class CommentResponse(CamelModel):
    id: str
    content: str
    post_id: str
    author_id: str
    created_at: datetime
    author: Optional[UserResponse] = None


class CommentCreateRequest(CamelModel):
    content: Optional[str] = None
    author_id: Optional[str] = None
