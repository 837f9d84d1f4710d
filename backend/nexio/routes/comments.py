"""
Nexio Backend — Comment Routes
===============================

    DELETE /api/comments/{id}   author only (403 for anyone else)

Listing and creating comments live under /api/posts/{id}/comments.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nexio.database import commit_session, get_db_session
from nexio.routes.deps import require_caller_id
from nexio.schemas.common import ErrorResponse, SuccessResponse
from nexio.services.comment_service import comment_service

router = APIRouter(prefix="/api/comments", tags=["Comments"])


@router.delete(
    "/{comment_id}",
    response_model=SuccessResponse,
    responses={
        401: {"description": "No caller identity", "model": ErrorResponse},
        403: {"description": "Not the author", "model": ErrorResponse},
        404: {"description": "Comment not found", "model": ErrorResponse},
    },
    summary="Delete your comment",
)
async def delete_comment(
    comment_id: str,
    caller_id: str = Depends(require_caller_id),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    await comment_service.delete(db, comment_id, caller_id)
    await commit_session(db)
    return SuccessResponse()
