"""Nexio Backend — Search Schemas"""

from typing import List

from nexio.schemas.common import CamelModel
from nexio.schemas.post import PostResponse
from nexio.schemas.user import UserResponse


class SearchResponse(CamelModel):
    """
    GET /api/search result.

    Both lists are empty (not an error) for queries under two characters and
    for queries that match nothing. Posts carry author and caller flags but
    no images.
    """
    posts: List[PostResponse] = []
    users: List[UserResponse] = []
