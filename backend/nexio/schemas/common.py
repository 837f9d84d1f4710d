"""
Nexio Backend — Shared Schema Pieces
=====================================

What:  The camelCase base model plus the response shapes every router uses
       (errors, `{"success": true}`, health).

Wire format:
    JSON keys are camelCase (`upvotesCount`, `isUpvoted`, `authorId`).
    CamelModel generates those aliases from the snake_case field names;
    request bodies accept either spelling (populate_by_name) and responses
    are serialized by alias (FastAPI's default for response_model).
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every request and response body."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SuccessResponse(CamelModel):
    """Returned by toggles and other actions with nothing else to report."""
    success: bool = True


class ErrorResponse(BaseModel):
    """
    What:  Standardized error body for every non-2xx response.

    Fields:
        error:      Machine-readable code (validation_error, not_found, ...)
        message:    Human-readable description, shown to the user as-is
        details:    Optional extra context (e.g. which field failed)
        request_id: Correlation ID for finding the request in server logs

    Example:
        {
            "error": "validation_error",
            "message": "Cannot follow yourself",
            "details": {"field": "id"},
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer checks."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
