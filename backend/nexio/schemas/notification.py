"""
Nexio Backend — Notification Schemas
=====================================

fromUser is the public record of the user who triggered the notification,
or null for system notifications and deleted users.
"""

from datetime import datetime
from typing import Optional

from nexio.schemas.common import CamelModel
from nexio.schemas.user import UserResponse


class NotificationResponse(CamelModel):
    id: str
    user_id: str
    type: str
    title: str
    message: str
    from_user_id: Optional[str] = None
    post_id: Optional[str] = None
    is_read: bool = False
    created_at: datetime
    from_user: Optional[UserResponse] = None


class MarkAllReadResponse(CamelModel):
    success: bool = True
    updated: int = 0
