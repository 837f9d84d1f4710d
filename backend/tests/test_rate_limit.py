"""
Nexio Backend — Rate Limit Middleware Tests
============================================

Test Strategy:
    ✅ Requests under the limit pass
    ✅ The request over the limit gets 429 with Retry-After
    ✅ Excluded paths are never counted
    ✅ Old timestamps slide out of the window
"""

from unittest.mock import patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from nexio.middleware.rate_limit import RateLimitMiddleware


def make_app(max_requests: int = 10, window: int = 60) -> FastAPI:
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, max_requests=max_requests, window=window)

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


class TestRateLimit:

    def setup_method(self):
        self.app = make_app()

    async def _client(self):
        return AsyncClient(transport=ASGITransport(app=self.app), base_url="http://test")

    @pytest.mark.asyncio
    async def test_limit_enforced(self):
        async with await self._client() as client:
            for _ in range(10):
                assert (await client.get("/ping")).status_code == 200
            response = await client.get("/ping")

        assert response.status_code == 429
        assert int(response.headers["Retry-After"]) > 0
        body = response.json()
        assert body["error"] == "rate_limit_exceeded"
        assert body["message"].startswith("Rate limit exceeded")

    @pytest.mark.asyncio
    async def test_excluded_paths(self):
        async with await self._client() as client:
            for _ in range(15):
                assert (await client.get("/health")).status_code == 200
            assert (await client.get("/ping")).status_code == 200

    @pytest.mark.asyncio
    async def test_window_slides(self):
        with patch("nexio.middleware.rate_limit.time") as clock:
            clock.time.return_value = 1000.0
            async with await self._client() as client:
                for _ in range(10):
                    await client.get("/ping")
                assert (await client.get("/ping")).status_code == 429

                clock.time.return_value = 1061.0
                assert (await client.get("/ping")).status_code == 200
