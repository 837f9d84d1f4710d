"""
Nexio Backend — Auth and Identity Tests
========================================

Test Strategy:
    ✅ Signup returns the public user (no password) plus a token
    ✅ Duplicate email and missing fields are 400
    ✅ Login with right and wrong credentials
    ✅ Bearer token and x-user-id both identify the caller
"""

import pytest

from conftest import as_user


class TestSignup:

    @pytest.mark.asyncio
    async def test_signup_returns_public_user(self, test_client):
        response = await test_client.post(
            "/api/auth/signup",
            json={"name": "Ada", "email": "ada@example.com", "password": "secret123"},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["token"]
        user = body["user"]
        assert user["name"] == "Ada"
        assert user["email"] == "ada@example.com"
        assert "password" not in user
        assert user["reputationScore"] == 0
        assert user["followersCount"] == 0
        assert user["postsCount"] == 0

    @pytest.mark.asyncio
    async def test_duplicate_email(self, test_client, signup):
        await signup(email="dup@example.com")
        response = await test_client.post(
            "/api/auth/signup",
            json={"name": "Other", "email": "dup@example.com", "password": "pw123456"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Email already in use"

    @pytest.mark.asyncio
    async def test_missing_fields(self, test_client):
        response = await test_client.post("/api/auth/signup", json={"email": "a@b.c"})
        assert response.status_code == 400
        assert response.json()["message"] == "Name, email, and password are required"

    @pytest.mark.asyncio
    async def test_wrong_field_type_is_400(self, test_client):
        response = await test_client.post(
            "/api/auth/signup", json={"name": ["x"], "email": "a@b.c", "password": "pw"}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_success(self, test_client, signup):
        user = await signup(email="ada@example.com", password="secret123")
        response = await test_client.post(
            "/api/auth/login", json={"email": "ada@example.com", "password": "secret123"}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["user"]["id"] == user["id"]
        assert "password" not in body["user"]
        assert body["token"]

    @pytest.mark.asyncio
    async def test_wrong_password(self, test_client, signup):
        await signup(email="ada@example.com", password="secret123")
        response = await test_client.post(
            "/api/auth/login", json={"email": "ada@example.com", "password": "nope"}
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_unknown_email_same_answer(self, test_client):
        response = await test_client.post(
            "/api/auth/login", json={"email": "ghost@example.com", "password": "nope"}
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_missing_fields(self, test_client):
        response = await test_client.post("/api/auth/login", json={"email": "a@b.c"})
        assert response.status_code == 400
        assert response.json()["message"] == "Email and password are required"


class TestCallerIdentity:

    @pytest.mark.asyncio
    async def test_bearer_token_identifies_caller(self, test_client, signup):
        user = await signup()
        response = await test_client.get(
            "/api/notifications", headers={"Authorization": f"Bearer {user['token']}"}
        )
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_header_identifies_caller(self, test_client, signup):
        user = await signup()
        response = await test_client.get("/api/notifications", headers=as_user(user["id"]))
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_anonymous_is_401(self, test_client):
        response = await test_client.get("/api/notifications")
        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"

    @pytest.mark.asyncio
    async def test_bad_token_is_401(self, test_client):
        response = await test_client.get(
            "/api/notifications", headers={"Authorization": "Bearer not-a-token"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_empty_bearer_is_401(self, test_client):
        response = await test_client.get(
            "/api/notifications", headers={"Authorization": "Bearer "}
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid authorization header"

    @pytest.mark.asyncio
    async def test_non_bearer_scheme_ignored_on_public_reads(self, test_client, signup, create_post):
        author = await signup()
        await create_post(author["id"])
        response = await test_client.get("/api/posts", headers={"Authorization": "Basic abc"})
        assert response.status_code == 200
        assert len(response.json()) == 1
        assert response.json()[0]["isUpvoted"] is False

    @pytest.mark.asyncio
    async def test_non_bearer_scheme_falls_back_to_header(self, test_client, signup):
        user = await signup()
        response = await test_client.get(
            "/api/notifications",
            headers={"Authorization": "Basic abc", **as_user(user["id"])},
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_non_bearer_scheme_alone_is_anonymous(self, test_client):
        response = await test_client.get(
            "/api/notifications", headers={"Authorization": "Basic abc"}
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Unauthorized"

    @pytest.mark.asyncio
    async def test_unknown_user_cannot_engage(self, test_client, signup, create_post):
        author = await signup()
        post = await create_post(author["id"])
        response = await test_client.post(
            f"/api/posts/{post['id']}/upvote", headers=as_user("no-such-user")
        )
        assert response.status_code == 401
