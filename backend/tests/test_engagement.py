"""
Nexio Backend — Engagement Tests
=================================

Upvotes, saves and follows through the HTTP API.

Test Strategy:
    ✅ Upvote then unvote restores count and reputation
    ✅ Duplicate toggles are 400 and leave counters alone
    ✅ Upvote notifies the author, never self
    ✅ Saved list shows isSaved and the owner's isUpvoted
    ✅ Follow counters, self-follow, notification, isFollowing
    ✅ Missing posts/users are 404
"""

import pytest

from conftest import as_user


async def get_post(client, post_id, user_id=None):
    headers = as_user(user_id) if user_id else {}
    response = await client.get(f"/api/posts/{post_id}", headers=headers)
    assert response.status_code == 200
    return response.json()


async def get_user(client, user_id, caller_id=None):
    headers = as_user(caller_id) if caller_id else {}
    response = await client.get(f"/api/users/{user_id}", headers=headers)
    assert response.status_code == 200
    return response.json()


class TestUpvotes:

    @pytest.mark.asyncio
    async def test_upvote_notifies_and_adds_reputation(self, test_client, signup, create_post):
        u1 = await signup(name="Author")
        u2 = await signup(name="Reader")
        post = await create_post(u1["id"])

        response = await test_client.post(
            f"/api/posts/{post['id']}/upvote", headers=as_user(u2["id"])
        )
        assert response.status_code == 200
        assert response.json() == {"success": True}

        detail = await get_post(test_client, post["id"], u2["id"])
        assert detail["upvotesCount"] == 1
        assert detail["isUpvoted"] is True
        assert (await get_user(test_client, u1["id"]))["reputationScore"] == 1

        inbox = await test_client.get("/api/notifications", headers=as_user(u1["id"]))
        notifications = inbox.json()
        assert len(notifications) == 1
        assert notifications[0]["type"] == "upvote"
        assert notifications[0]["title"] == "Post Upvoted"
        assert notifications[0]["fromUserId"] == u2["id"]
        assert notifications[0]["postId"] == post["id"]
        assert notifications[0]["isRead"] is False

    @pytest.mark.asyncio
    async def test_unvote_restores_counters(self, test_client, signup, create_post):
        author = await signup()
        voter = await signup()
        post = await create_post(author["id"])

        await test_client.post(f"/api/posts/{post['id']}/upvote", headers=as_user(voter["id"]))
        response = await test_client.delete(
            f"/api/posts/{post['id']}/upvote", headers=as_user(voter["id"])
        )
        assert response.status_code == 200

        detail = await get_post(test_client, post["id"], voter["id"])
        assert detail["upvotesCount"] == 0
        assert detail["isUpvoted"] is False
        assert (await get_user(test_client, author["id"]))["reputationScore"] == 0

    @pytest.mark.asyncio
    async def test_duplicate_upvote(self, test_client, signup, create_post):
        author = await signup()
        voter = await signup()
        post = await create_post(author["id"])

        await test_client.post(f"/api/posts/{post['id']}/upvote", headers=as_user(voter["id"]))
        again = await test_client.post(
            f"/api/posts/{post['id']}/upvote", headers=as_user(voter["id"])
        )
        assert again.status_code == 400
        assert again.json()["message"] == "Already upvoted"
        assert (await get_post(test_client, post["id"]))["upvotesCount"] == 1

    @pytest.mark.asyncio
    async def test_unvote_without_upvote(self, test_client, signup, create_post):
        author = await signup()
        post = await create_post(author["id"])
        response = await test_client.delete(
            f"/api/posts/{post['id']}/upvote", headers=as_user(author["id"])
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Not upvoted"
        assert (await get_post(test_client, post["id"]))["upvotesCount"] == 0

    @pytest.mark.asyncio
    async def test_self_upvote_has_no_notification(self, test_client, signup, create_post):
        author = await signup()
        post = await create_post(author["id"])
        await test_client.post(f"/api/posts/{post['id']}/upvote", headers=as_user(author["id"]))

        inbox = await test_client.get("/api/notifications", headers=as_user(author["id"]))
        assert inbox.json() == []
        assert (await get_user(test_client, author["id"]))["reputationScore"] == 1

    @pytest.mark.asyncio
    async def test_upvote_missing_post(self, test_client, signup):
        voter = await signup()
        response = await test_client.post("/api/posts/nope/upvote", headers=as_user(voter["id"]))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_upvote_requires_caller(self, test_client, signup, create_post):
        author = await signup()
        post = await create_post(author["id"])
        response = await test_client.post(f"/api/posts/{post['id']}/upvote")
        assert response.status_code == 401


class TestSaves:

    @pytest.mark.asyncio
    async def test_save_and_saved_list(self, test_client, signup, create_post):
        author = await signup()
        reader = await signup()
        post = await create_post(author["id"])

        await test_client.post(f"/api/posts/{post['id']}/upvote", headers=as_user(reader["id"]))
        response = await test_client.post(
            f"/api/posts/{post['id']}/save", headers=as_user(reader["id"])
        )
        assert response.status_code == 200

        detail = await get_post(test_client, post["id"], reader["id"])
        assert detail["savesCount"] == 1
        assert detail["isSaved"] is True

        saved = (await test_client.get(f"/api/users/{reader['id']}/saved")).json()
        assert [p["id"] for p in saved] == [post["id"]]
        assert saved[0]["isSaved"] is True
        assert saved[0]["isUpvoted"] is True

    @pytest.mark.asyncio
    async def test_duplicate_save_and_unsave(self, test_client, signup, create_post):
        author = await signup()
        reader = await signup()
        post = await create_post(author["id"])
        url = f"/api/posts/{post['id']}/save"

        await test_client.post(url, headers=as_user(reader["id"]))
        again = await test_client.post(url, headers=as_user(reader["id"]))
        assert again.status_code == 400
        assert again.json()["message"] == "Already saved"

        assert (await test_client.delete(url, headers=as_user(reader["id"]))).status_code == 200
        twice = await test_client.delete(url, headers=as_user(reader["id"]))
        assert twice.status_code == 400
        assert twice.json()["message"] == "Not saved"
        assert (await get_post(test_client, post["id"]))["savesCount"] == 0


class TestFollows:

    @pytest.mark.asyncio
    async def test_follow_updates_counters(self, test_client, signup):
        ada = await signup(name="Ada")
        bob = await signup(name="Bob")

        response = await test_client.post(
            f"/api/users/{bob['id']}/follow", headers=as_user(ada["id"])
        )
        assert response.status_code == 200

        bob_profile = await get_user(test_client, bob["id"], caller_id=ada["id"])
        assert bob_profile["followersCount"] == 1
        assert bob_profile["isFollowing"] is True
        assert (await get_user(test_client, ada["id"]))["followingCount"] == 1

        followers = (await test_client.get(f"/api/users/{bob['id']}/followers")).json()
        assert [u["id"] for u in followers] == [ada["id"]]
        following = (await test_client.get(f"/api/users/{ada['id']}/following")).json()
        assert [u["id"] for u in following] == [bob["id"]]

        inbox = (await test_client.get("/api/notifications", headers=as_user(bob["id"]))).json()
        assert inbox[0]["type"] == "follow"
        assert inbox[0]["title"] == "New Follower"
        assert inbox[0]["fromUserId"] == ada["id"]

    @pytest.mark.asyncio
    async def test_unfollow(self, test_client, signup):
        ada = await signup()
        bob = await signup()
        url = f"/api/users/{bob['id']}/follow"

        await test_client.post(url, headers=as_user(ada["id"]))
        assert (await test_client.delete(url, headers=as_user(ada["id"]))).status_code == 200

        bob_profile = await get_user(test_client, bob["id"], caller_id=ada["id"])
        assert bob_profile["followersCount"] == 0
        assert bob_profile["isFollowing"] is False

        again = await test_client.delete(url, headers=as_user(ada["id"]))
        assert again.status_code == 400
        assert again.json()["message"] == "Not following"

    @pytest.mark.asyncio
    async def test_cannot_follow_self(self, test_client, signup):
        ada = await signup()
        response = await test_client.post(
            f"/api/users/{ada['id']}/follow", headers=as_user(ada["id"])
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Cannot follow yourself"
        assert (await get_user(test_client, ada["id"]))["followersCount"] == 0

    @pytest.mark.asyncio
    async def test_duplicate_follow(self, test_client, signup):
        ada = await signup()
        bob = await signup()
        url = f"/api/users/{bob['id']}/follow"
        await test_client.post(url, headers=as_user(ada["id"]))
        again = await test_client.post(url, headers=as_user(ada["id"]))
        assert again.status_code == 400
        assert again.json()["message"] == "Already following"
        assert (await get_user(test_client, bob["id"]))["followersCount"] == 1

    @pytest.mark.asyncio
    async def test_follow_unknown_user(self, test_client, signup):
        ada = await signup()
        response = await test_client.post("/api/users/ghost/follow", headers=as_user(ada["id"]))
        assert response.status_code == 404
