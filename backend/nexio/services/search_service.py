"""
Nexio Backend — Search Service
===============================

What:  Combined post + user search for GET /api/search.
How:   Case-insensitive substring match; posts on title/content/tags
       (newest first), users on name/email (capped). Queries shorter than
       settings.min_search_length return empty lists without touching the
       database.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from nexio.config import settings
from nexio.schemas.search import SearchResponse
from nexio.schemas.user import UserResponse
from nexio.services.post_service import post_service
from nexio.services.storage import storage

logger = logging.getLogger(__name__)


class SearchService:

    async def search(
        self, db: AsyncSession, query: Optional[str], caller_id: Optional[str]
    ) -> SearchResponse:
        if not query or len(query) < settings.min_search_length:
            return SearchResponse(posts=[], users=[])

        posts = await storage.search_posts(db, query)
        users = await storage.search_users(db, query)
        logger.debug("Search %r matched %d post(s), %d user(s)", query, len(posts), len(users))

        return SearchResponse(
            posts=await post_service.build_post_responses(
                db, posts, caller_id, include_images=False
            ),
            users=[UserResponse.model_validate(user) for user in users],
        )


search_service = SearchService()
