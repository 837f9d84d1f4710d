"""
Nexio Backend — Search Route
=============================

    GET /api/search?q=   posts (title/content/tags) and users (name/email)

Queries under two characters return {"posts": [], "users": []}.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from nexio.database import get_db_session
from nexio.routes.deps import get_caller_id
from nexio.schemas.search import SearchResponse
from nexio.services.search_service import search_service

router = APIRouter(prefix="/api", tags=["Search"])


@router.get("/search", response_model=SearchResponse, summary="Search posts and users")
async def search(
    q: str | None = Query(default=None, description="Case-insensitive substring"),
    caller_id: Optional[str] = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db_session),
) -> SearchResponse:
    return await search_service.search(db, q, caller_id)
