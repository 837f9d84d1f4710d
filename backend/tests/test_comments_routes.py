"""
Nexio Backend — Comment Tests
==============================

Test Strategy:
    ✅ Create increments commentsCount and notifies the post author
    ✅ List newest first with authors
    ✅ Only the author deletes; the counter drops by exactly one
"""

import pytest

from conftest import as_user


async def add_comment(client, post_id, author_id, content="Nice"):
    response = await client.post(
        f"/api/posts/{post_id}/comments", json={"content": content, "authorId": author_id}
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateComment:

    @pytest.mark.asyncio
    async def test_create_comment(self, test_client, signup, create_post):
        author = await signup()
        reader = await signup(name="Reader")
        post = await create_post(author["id"])

        comment = await add_comment(test_client, post["id"], reader["id"], "Great read")
        assert comment["content"] == "Great read"
        assert comment["postId"] == post["id"]
        assert comment["author"]["name"] == "Reader"

        detail = (await test_client.get(f"/api/posts/{post['id']}")).json()
        assert detail["commentsCount"] == 1

        inbox = (await test_client.get("/api/notifications", headers=as_user(author["id"]))).json()
        assert inbox[0]["type"] == "comment"
        assert inbox[0]["title"] == "New Comment"
        assert inbox[0]["postId"] == post["id"]

    @pytest.mark.asyncio
    async def test_own_post_comment_has_no_notification(self, test_client, signup, create_post):
        author = await signup()
        post = await create_post(author["id"])
        await add_comment(test_client, post["id"], author["id"])
        inbox = await test_client.get("/api/notifications", headers=as_user(author["id"]))
        assert inbox.json() == []

    @pytest.mark.asyncio
    async def test_missing_content(self, test_client, signup, create_post):
        author = await signup()
        post = await create_post(author["id"])
        response = await test_client.post(
            f"/api/posts/{post['id']}/comments", json={"authorId": author["id"]}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Content and authorId are required"

    @pytest.mark.asyncio
    async def test_missing_post(self, test_client, signup):
        author = await signup()
        response = await test_client.post(
            "/api/posts/nope/comments", json={"content": "x", "authorId": author["id"]}
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_list_newest_first(self, test_client, signup, create_post):
        author = await signup()
        post = await create_post(author["id"])
        first = await add_comment(test_client, post["id"], author["id"], "first")
        second = await add_comment(test_client, post["id"], author["id"], "second")

        response = await test_client.get(f"/api/posts/{post['id']}/comments")
        assert [c["id"] for c in response.json()] == [second["id"], first["id"]]
        assert response.json()[0]["author"]["id"] == author["id"]


class TestDeleteComment:

    @pytest.mark.asyncio
    async def test_non_author_forbidden(self, test_client, signup, create_post):
        author = await signup()
        other = await signup()
        post = await create_post(author["id"])
        comment = await add_comment(test_client, post["id"], author["id"])

        response = await test_client.delete(
            f"/api/comments/{comment['id']}", headers=as_user(other["id"])
        )
        assert response.status_code == 403
        detail = (await test_client.get(f"/api/posts/{post['id']}")).json()
        assert detail["commentsCount"] == 1

    @pytest.mark.asyncio
    async def test_author_deletes(self, test_client, signup, create_post):
        author = await signup()
        post = await create_post(author["id"])
        keep = await add_comment(test_client, post["id"], author["id"], "keep")
        drop = await add_comment(test_client, post["id"], author["id"], "drop")

        response = await test_client.delete(
            f"/api/comments/{drop['id']}", headers=as_user(author["id"])
        )
        assert response.status_code == 200
        assert response.json() == {"success": True}

        detail = (await test_client.get(f"/api/posts/{post['id']}")).json()
        assert detail["commentsCount"] == 1
        remaining = (await test_client.get(f"/api/posts/{post['id']}/comments")).json()
        assert [c["id"] for c in remaining] == [keep["id"]]

    @pytest.mark.asyncio
    async def test_missing_comment(self, test_client, signup):
        user = await signup()
        response = await test_client.delete("/api/comments/nope", headers=as_user(user["id"]))
        assert response.status_code == 404
        assert response.json()["message"] == "Comment not found"

    @pytest.mark.asyncio
    async def test_requires_caller(self, test_client):
        response = await test_client.delete("/api/comments/anything")
        assert response.status_code == 401
