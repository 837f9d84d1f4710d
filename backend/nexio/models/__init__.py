"""
Nexio Backend — ORM Models
===========================

Importing this package registers every table on `Base.metadata`
(Alembic autogenerate and `create_schema()` rely on that).
"""

from nexio.models.user import User
from nexio.models.post import Post, PostImage
from nexio.models.comment import Comment
from nexio.models.engagement import Upvote, Save, Follower
from nexio.models.notification import Notification
from nexio.models.report import Report, REPORT_STATUSES

__all__ = [
    "User",
    "Post",
    "PostImage",
    "Comment",
    "Upvote",
    "Save",
    "Follower",
    "Notification",
    "Report",
    "REPORT_STATUSES",
]
