"""
Nexio Backend — User Route Tests
=================================

Test Strategy:
    ✅ Profile read, 404 for unknown ids
    ✅ Profile edit limited to name/bio/expertise/profilePicUrl
    ✅ Account deletion: self only, cascades engagement and counters
"""

import pytest

from conftest import as_user


class TestProfile:

    @pytest.mark.asyncio
    async def test_get_profile(self, test_client, signup):
        user = await signup(name="Ada")
        response = await test_client.get(f"/api/users/{user['id']}")
        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Ada"
        assert body["isFollowing"] is False
        assert "password" not in body

    @pytest.mark.asyncio
    async def test_unknown_user(self, test_client):
        response = await test_client.get("/api/users/ghost")
        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    @pytest.mark.asyncio
    async def test_update_profile(self, test_client, signup):
        user = await signup()
        response = await test_client.patch(
            f"/api/users/{user['id']}",
            json={"bio": "Curious", "expertise": "Physics", "reputationScore": 999},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["bio"] == "Curious"
        assert body["expertise"] == "Physics"
        assert body["reputationScore"] == 0

    @pytest.mark.asyncio
    async def test_empty_name_rejected(self, test_client, signup):
        user = await signup()
        response = await test_client.patch(f"/api/users/{user['id']}", json={"name": ""})
        assert response.status_code == 400
        assert response.json()["message"] == "Name cannot be empty"

    @pytest.mark.asyncio
    async def test_user_posts(self, test_client, signup, create_post):
        ada = await signup()
        bob = await signup()
        mine = await create_post(ada["id"])
        await create_post(bob["id"])
        response = await test_client.get(f"/api/users/{ada['id']}/posts")
        assert [p["id"] for p in response.json()] == [mine["id"]]


class TestDeleteAccount:

    @pytest.mark.asyncio
    async def test_only_self(self, test_client, signup):
        ada = await signup()
        bob = await signup()
        response = await test_client.delete(f"/api/users/{ada['id']}", headers=as_user(bob["id"]))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_delete_cascades(self, test_client, signup, create_post):
        leaving = await signup()
        staying = await signup()
        their_post = await create_post(staying["id"])
        own_post = await create_post(leaving["id"])

        headers = as_user(leaving["id"])
        await test_client.post(f"/api/posts/{their_post['id']}/upvote", headers=headers)
        await test_client.post(f"/api/posts/{their_post['id']}/save", headers=headers)
        await test_client.post(
            f"/api/posts/{their_post['id']}/comments",
            json={"content": "bye", "authorId": leaving["id"]},
        )
        await test_client.post(f"/api/users/{staying['id']}/follow", headers=headers)

        response = await test_client.delete(f"/api/users/{leaving['id']}", headers=headers)
        assert response.status_code == 200

        assert (await test_client.get(f"/api/users/{leaving['id']}")).status_code == 404
        assert (await test_client.get(f"/api/posts/{own_post['id']}")).status_code == 404

        post = (await test_client.get(f"/api/posts/{their_post['id']}")).json()
        assert post["upvotesCount"] == 0
        assert post["savesCount"] == 0
        assert post["commentsCount"] == 0

        profile = (await test_client.get(f"/api/users/{staying['id']}")).json()
        assert profile["followersCount"] == 0
        assert profile["reputationScore"] == 0
        inbox = await test_client.get("/api/notifications", headers=as_user(staying["id"]))
        assert inbox.json() == []
