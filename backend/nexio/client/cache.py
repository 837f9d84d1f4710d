"""
Nexio Client — Query Cache
===========================

What:  Cached GET requests keyed by tuples, with prefix invalidation.

Keys:
    String parts join into the path; dict parts become query parameters.

        ("/api/posts",)                       → GET /api/posts
        ("/api/posts", post_id, "comments")   → GET /api/posts/{id}/comments
        ("/api/search", {"q": "python"})      → GET /api/search?q=python

Freshness:
    An entry is served from memory for `stale_time` seconds (30 by default),
    then refetched on the next read. Nothing refetches in the background.

Invalidation:
    invalidate(("/api/posts",)) drops every key starting with "/api/posts":
    feed pages, trending, details and comment lists. Invalidating
    ("/api/posts", post_id) drops that post's detail and comments only.
"""

import logging
import time
from typing import Any, Callable, Dict, Hashable, Literal, Optional, Tuple

from nexio.client.api import ApiClient, ApiError

logger = logging.getLogger(__name__)

QueryKey = Tuple[Any, ...]
UnauthorizedBehavior = Literal["throw", "return_none"]

DEFAULT_STALE_TIME = 30.0


def _freeze(part: Any) -> Hashable:
    if isinstance(part, dict):
        return tuple(sorted((str(k), str(v)) for k, v in part.items() if v is not None))
    return part


def build_request(key: QueryKey) -> Tuple[str, Dict[str, Any]]:
    """Split a query key into (path, params)."""
    segments = []
    params: Dict[str, Any] = {}
    for part in key:
        if isinstance(part, dict):
            params.update(part)
        elif part is not None:
            segments.append(str(part))
    return "/".join(segments), params


class QueryCache:

    def __init__(
        self,
        api: ApiClient,
        stale_time: float = DEFAULT_STALE_TIME,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.api = api
        self.stale_time = stale_time
        self._clock = clock
        # frozen key → (original key, fetched_at, data)
        self._entries: Dict[Hashable, Tuple[QueryKey, float, Any]] = {}

    def _frozen(self, key: QueryKey) -> Hashable:
        return tuple(_freeze(part) for part in key)

    def get(self, key: QueryKey) -> Optional[Any]:
        """Cached data for a key regardless of age, or None."""
        entry = self._entries.get(self._frozen(key))
        return entry[2] if entry else None

    def set(self, key: QueryKey, data: Any) -> None:
        self._entries[self._frozen(key)] = (key, self._clock(), data)

    def is_fresh(self, key: QueryKey) -> bool:
        entry = self._entries.get(self._frozen(key))
        return entry is not None and self._clock() - entry[1] < self.stale_time

    async def fetch(
        self, key: QueryKey, on_unauthorized: UnauthorizedBehavior = "throw"
    ) -> Any:
        """
        Return fresh cached data or GET it.

        Raises:
            ApiError: non-2xx, except 401 with on_unauthorized="return_none"
        """
        if self.is_fresh(key):
            return self.get(key)

        path, params = build_request(key)
        try:
            data = await self.api.get(path, params=params or None)
        except ApiError as e:
            if e.status == 401 and on_unauthorized == "return_none":
                data = None
            else:
                raise
        self.set(key, data)
        return data

    def invalidate(self, prefix: QueryKey) -> int:
        """Drop every entry whose key starts with `prefix`; returns the count."""
        frozen_prefix = self._frozen(prefix)
        size = len(frozen_prefix)
        stale = [k for k in self._entries if k[:size] == frozen_prefix]
        for k in stale:
            del self._entries[k]
        if stale:
            logger.debug("Invalidated %d cached quer(ies) under %r", len(stale), prefix)
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()
