"""
Nexio Client — Query Cache and Session Store Tests
===================================================

Test Strategy:
    ✅ Query keys map to paths and params
    ✅ Fresh entries are served from memory; stale ones refetch
    ✅ Prefix invalidation drops exactly the matching keys
    ✅ 401 handling: throw vs return None
    ✅ Session file: auth record without password, onboarding flag
"""

import json
from unittest.mock import AsyncMock

import pytest

from nexio.client.api import ApiError
from nexio.client.cache import QueryCache, build_request
from nexio.client.session import AUTH_STORAGE_KEY, ONBOARDING_STORAGE_KEY, SessionStore


class FakeClock:

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestBuildRequest:

    def test_path_segments(self):
        assert build_request(("/api/posts", "p1", "comments")) == ("/api/posts/p1/comments", {})

    def test_params(self):
        assert build_request(("/api/search", {"q": "python"})) == ("/api/search", {"q": "python"})


class TestQueryCache:

    def setup_method(self):
        self.api = AsyncMock()
        self.api.get = AsyncMock(return_value=[{"id": "p1"}])
        self.clock = FakeClock()
        self.cache = QueryCache(self.api, stale_time=30.0, clock=self.clock)

    @pytest.mark.asyncio
    async def test_fresh_entry_not_refetched(self):
        await self.cache.fetch(("/api/posts",))
        self.clock.now = 29.0
        await self.cache.fetch(("/api/posts",))
        assert self.api.get.await_count == 1

    @pytest.mark.asyncio
    async def test_stale_entry_refetched(self):
        await self.cache.fetch(("/api/posts",))
        self.clock.now = 30.0
        await self.cache.fetch(("/api/posts",))
        assert self.api.get.await_count == 2

    @pytest.mark.asyncio
    async def test_params_passed_through(self):
        await self.cache.fetch(("/api/posts", {"category": "Science"}))
        self.api.get.assert_awaited_once_with("/api/posts", params={"category": "Science"})

    def test_invalidate_prefix(self):
        self.cache.set(("/api/posts",), [])
        self.cache.set(("/api/posts", "trending"), [])
        self.cache.set(("/api/posts", "p1"), {})
        self.cache.set(("/api/posts", "p1", "comments"), [])
        self.cache.set(("/api/users", "u1"), {})

        assert self.cache.invalidate(("/api/posts", "p1")) == 2
        assert self.cache.get(("/api/posts", "trending")) == []
        assert self.cache.invalidate(("/api/posts",)) == 2
        assert self.cache.get(("/api/users", "u1")) == {}

    def test_dict_keys_are_order_insensitive(self):
        self.cache.set(("/api/search", {"q": "x", "page": 1}), ["hit"])
        assert self.cache.get(("/api/search", {"page": 1, "q": "x"})) == ["hit"]

    @pytest.mark.asyncio
    async def test_unauthorized_throws_by_default(self):
        self.api.get = AsyncMock(side_effect=ApiError(401, "Unauthorized"))
        with pytest.raises(ApiError) as exc_info:
            await self.cache.fetch(("/api/notifications",))
        assert exc_info.value.status == 401
        assert str(exc_info.value) == "401: Unauthorized"

    @pytest.mark.asyncio
    async def test_unauthorized_returns_none(self):
        self.api.get = AsyncMock(side_effect=ApiError(401, "Unauthorized"))
        result = await self.cache.fetch(("/api/notifications",), on_unauthorized="return_none")
        assert result is None

    @pytest.mark.asyncio
    async def test_other_errors_still_throw(self):
        self.api.get = AsyncMock(side_effect=ApiError(500, "boom"))
        with pytest.raises(ApiError):
            await self.cache.fetch(("/api/notifications",), on_unauthorized="return_none")


class TestSessionStore:

    @pytest.mark.asyncio
    async def test_empty_store(self, tmp_path):
        store = SessionStore(str(tmp_path / "session.json"))
        assert await store.load_auth() is None
        assert await store.is_onboarding_complete() is False

    @pytest.mark.asyncio
    async def test_save_auth_strips_password(self, tmp_path):
        path = tmp_path / "session.json"
        store = SessionStore(str(path))
        await store.save_auth({"id": "u1", "name": "Ada", "password": "hash"}, "tok")

        auth = await store.load_auth()
        assert auth == {"user": {"id": "u1", "name": "Ada"}, "token": "tok"}
        on_disk = json.loads(path.read_text())
        assert "password" not in on_disk[AUTH_STORAGE_KEY]["user"]

    @pytest.mark.asyncio
    async def test_save_user_keeps_token(self, tmp_path):
        store = SessionStore(str(tmp_path / "session.json"))
        await store.save_auth({"id": "u1", "name": "Ada"}, "tok")
        await store.save_user({"id": "u1", "name": "Ada L."})
        assert await store.load_auth() == {"user": {"id": "u1", "name": "Ada L."}, "token": "tok"}

    @pytest.mark.asyncio
    async def test_clear_auth_keeps_onboarding(self, tmp_path):
        path = tmp_path / "session.json"
        store = SessionStore(str(path))
        await store.set_onboarding_complete()
        await store.save_auth({"id": "u1"}, None)
        await store.clear_auth()

        assert await store.load_auth() is None
        assert await store.is_onboarding_complete() is True
        assert json.loads(path.read_text()) == {ONBOARDING_STORAGE_KEY: "true"}

    @pytest.mark.asyncio
    async def test_corrupt_file_starts_fresh(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json")
        store = SessionStore(str(path))
        assert await store.load_auth() is None
