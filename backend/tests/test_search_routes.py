"""
Nexio Backend — Search Tests
=============================

Test Strategy:
    ✅ Queries shorter than 2 characters return empty lists
    ✅ Case-insensitive match on post title/content/tags and user name/email
    ✅ LIKE wildcards in the query are matched literally
"""

import pytest


class TestSearch:

    @pytest.mark.asyncio
    async def test_short_query_is_empty(self, test_client, signup, create_post):
        author = await signup(name="Ada")
        await create_post(author["id"], title="A")

        for q in ("", "a"):
            response = await test_client.get("/api/search", params={"q": q})
            assert response.status_code == 200
            assert response.json() == {"posts": [], "users": []}

        missing = await test_client.get("/api/search")
        assert missing.json() == {"posts": [], "users": []}

    @pytest.mark.asyncio
    async def test_no_match(self, test_client, signup, create_post):
        author = await signup()
        await create_post(author["id"])
        response = await test_client.get("/api/search", params={"q": "zzzzz"})
        assert response.json() == {"posts": [], "users": []}

    @pytest.mark.asyncio
    async def test_matches_posts_and_users(self, test_client, signup, create_post):
        pythonista = await signup(name="Pythonista", email="snake@example.com")
        other = await signup(name="Other", email="other@example.com")
        by_title = await create_post(other["id"], title="Learning PYTHON")
        by_tags = await create_post(other["id"], title="Misc", tags="python,tips")
        await create_post(other["id"], title="Rust notes", content="borrowing")

        response = await test_client.get("/api/search", params={"q": "python"})
        body = response.json()
        assert {p["id"] for p in body["posts"]} == {by_title["id"], by_tags["id"]}
        assert [u["id"] for u in body["users"]] == [pythonista["id"]]
        assert all(p["images"] == [] for p in body["posts"])
        assert "password" not in body["users"][0]

    @pytest.mark.asyncio
    async def test_wildcards_are_literal(self, test_client, signup, create_post):
        author = await signup()
        await create_post(author["id"], title="Plain title")
        percent = await create_post(author["id"], title="100% coverage")

        response = await test_client.get("/api/search", params={"q": "0%"})
        assert [p["id"] for p in response.json()["posts"]] == [percent["id"]]
