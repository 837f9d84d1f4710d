"""
Nexio Backend — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for each error scenario.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services, storage and dependencies; caught by global handlers.

Exception Hierarchy:
    NexioError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    │   └── DuplicateActionError → 400 Bad Request (already upvoted/saved/following)
    ├── AuthenticationError      → 401 Unauthorized
    ├── PermissionDeniedError    → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── RateLimitExceededError   → 429 Too Many Requests
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class NexioError(Exception):
    """
    Base exception for all Nexio application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; only returned for 4xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NexioError):
    """
    Raised when client input fails validation.

    When:    Missing required fields, too many images, bad image type or size,
             self-follow attempts.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Maximum 5 images allowed per post",
            "details": {"field": "images", "max_images": 5}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DuplicateActionError(ValidationError):
    """
    Raised when an engagement toggle is repeated.

    When:    Upvoting a post twice, saving twice, following twice, or removing
             an upvote/save/follow that does not exist.
    HTTP:    400 Bad Request (same as the existence check it stands in for)
    """

    def __init__(
        self,
        message: str = "Action already applied",
        action: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if action:
            ctx["action"] = action
        super().__init__(message=message, context=ctx)
        self.action = action


class AuthenticationError(NexioError):
    """
    Raised when the caller cannot be identified.

    When:    Missing identity on a protected action, invalid or expired bearer
             token, wrong email/password at login.
    HTTP:    401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(NexioError):
    """
    Raised when the caller is known but may not act on the resource.

    When:    Deleting someone else's comment or post, reading someone else's
             notification, non-admins moderating reports.
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "Forbidden",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(NexioError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records; the service layer converts
    None → NotFoundError so the handler can answer 404.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource


class DatabaseError(NexioError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost mid-query, unexpected constraint violation, etc.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Detailed error info
    is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(NexioError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests (with a Retry-After header)
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
