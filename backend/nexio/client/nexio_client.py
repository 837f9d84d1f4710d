"""
Nexio Client — Facade
======================

What:  One object a Python front end talks to: session, queries, mutations.
How:   Queries go through QueryCache. Each mutation awaits the API call and
       then invalidates the same keys the app screens invalidate:

    ┌─────────────────────────────┬───────────────────────────────────────┐
    │ mutation                    │ invalidated keys                      │
    ├─────────────────────────────┼───────────────────────────────────────┤
    │ create/delete post          │ ("/api/posts",) ("/api/users", me)    │
    │ upvote / unvote             │ ("/api/posts", id) ("/api/posts",)    │
    │ save / unsave               │ ("/api/posts", id) ("/api/posts",)    │
    │                             │ ("/api/users", me)                    │
    │ comment / delete comment    │ ("/api/posts", id, "comments")        │
    │                             │ ("/api/posts", id)                    │
    │ follow / unfollow           │ ("/api/users", user_id)               │
    │ mark one / all read         │ ("/api/notifications",)               │
    │ update profile              │ ("/api/users", me)                    │
    └─────────────────────────────┴───────────────────────────────────────┘

Usage:
    async with NexioClient("https://api.example.com", "~/.nexio/session.json") as client:
        await client.login("ada@example.com", "secret")
        feed = await client.feed()
        await client.upvote(feed[0]["id"])
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from nexio.client.api import ApiClient
from nexio.client.cache import QueryCache
from nexio.client.display import initial_route
from nexio.client.session import SessionStore

logger = logging.getLogger(__name__)


class NexioClient:

    def __init__(
        self,
        base_url: str,
        session_path: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        stale_time: float = 30.0,
    ):
        self.session = SessionStore(session_path)
        self.api = ApiClient(base_url, identity=self._identity, transport=transport)
        self.cache = QueryCache(self.api, stale_time=stale_time)
        self.user: Optional[Dict[str, Any]] = None
        self.token: Optional[str] = None

    async def __aenter__(self) -> "NexioClient":
        await self.restore()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.api.aclose()

    async def _identity(self) -> Tuple[Optional[str], Optional[str]]:
        return (self.user["id"] if self.user else None), self.token

    def _require_user(self) -> Dict[str, Any]:
        if self.user is None:
            raise RuntimeError("Not logged in")
        return self.user

    # ══════════════════════════════════════════════════════════════════════
    # Session
    # ══════════════════════════════════════════════════════════════════════

    async def restore(self) -> Optional[Dict[str, Any]]:
        """Load the persisted login, if any."""
        auth = await self.session.load_auth()
        self.user = auth["user"] if auth else None
        self.token = auth.get("token") if auth else None
        return self.user

    async def initial_route(self) -> str:
        return initial_route(await self.session.is_onboarding_complete(), self.user)

    async def complete_onboarding(self) -> None:
        await self.session.set_onboarding_complete()

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self.api.post("/api/auth/login", json={"email": email, "password": password})
        return await self._store_login(data)

    async def signup(self, name: str, email: str, password: str) -> Dict[str, Any]:
        data = await self.api.post(
            "/api/auth/signup", json={"name": name, "email": email, "password": password}
        )
        return await self._store_login(data)

    async def _store_login(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self.user = data["user"]
        self.token = data.get("token")
        await self.session.save_auth(self.user, self.token)
        self.cache.clear()
        logger.info("Logged in as %s", self.user["id"])
        return self.user

    async def logout(self) -> None:
        self.user = None
        self.token = None
        await self.session.clear_auth()
        self.cache.clear()

    async def update_profile(self, **fields: Any) -> Dict[str, Any]:
        """Fields use the API's names: name, bio, expertise, profilePicUrl."""
        me = self._require_user()
        user = await self.api.patch(f"/api/users/{me['id']}", json=fields)
        self.user = user
        await self.session.save_user(user)
        self.cache.invalidate(("/api/users", me["id"]))
        return user

    async def refresh_user(self) -> Optional[Dict[str, Any]]:
        """Re-read the stored user's record from the server."""
        if self.user is None:
            return None
        user = await self.api.get(f"/api/users/{self.user['id']}")
        user.pop("isFollowing", None)
        self.user = user
        await self.session.save_user(user)
        return user

    # ══════════════════════════════════════════════════════════════════════
    # Queries
    # ══════════════════════════════════════════════════════════════════════

    async def feed(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        if category:
            return await self.cache.fetch(("/api/posts", {"category": category}))
        return await self.cache.fetch(("/api/posts",))

    async def trending(self) -> List[Dict[str, Any]]:
        return await self.cache.fetch(("/api/posts", "trending"))

    async def post(self, post_id: str) -> Dict[str, Any]:
        return await self.cache.fetch(("/api/posts", post_id))

    async def comments(self, post_id: str) -> List[Dict[str, Any]]:
        return await self.cache.fetch(("/api/posts", post_id, "comments"))

    async def profile(self, user_id: str) -> Dict[str, Any]:
        return await self.cache.fetch(("/api/users", user_id))

    async def user_posts(self, user_id: str) -> List[Dict[str, Any]]:
        return await self.cache.fetch(("/api/users", user_id, "posts"))

    async def saved_posts(self, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        user_id = user_id or self._require_user()["id"]
        return await self.cache.fetch(("/api/users", user_id, "saved"))

    async def notifications(self) -> Optional[List[Dict[str, Any]]]:
        """The inbox, or None when the server does not recognize the caller."""
        return await self.cache.fetch(("/api/notifications",), on_unauthorized="return_none")

    async def search(self, query: str) -> Dict[str, Any]:
        return await self.cache.fetch(("/api/search", {"q": query}))

    # ══════════════════════════════════════════════════════════════════════
    # Mutations
    # ══════════════════════════════════════════════════════════════════════

    async def create_post(
        self,
        title: str,
        content: str,
        category: str,
        tags: Optional[str] = None,
        cover_image_url: Optional[str] = None,
        images: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        me = self._require_user()
        body = {
            "title": title,
            "content": content,
            "category": category,
            "tags": tags,
            "authorId": me["id"],
            "coverImageUrl": cover_image_url,
            "images": images or [],
        }
        post = await self.api.post("/api/posts", json=body)
        self.cache.invalidate(("/api/posts",))
        self.cache.invalidate(("/api/users", me["id"]))
        return post

    async def delete_post(self, post_id: str) -> None:
        me = self._require_user()
        await self.api.delete(f"/api/posts/{post_id}")
        self.cache.invalidate(("/api/posts",))
        self.cache.invalidate(("/api/users", me["id"]))

    async def upvote(self, post_id: str) -> None:
        await self.api.post(f"/api/posts/{post_id}/upvote")
        self._invalidate_post(post_id)

    async def unvote(self, post_id: str) -> None:
        await self.api.delete(f"/api/posts/{post_id}/upvote")
        self._invalidate_post(post_id)

    async def save(self, post_id: str) -> None:
        await self.api.post(f"/api/posts/{post_id}/save")
        self._invalidate_post(post_id)
        self._invalidate_own_saved()

    async def unsave(self, post_id: str) -> None:
        await self.api.delete(f"/api/posts/{post_id}/save")
        self._invalidate_post(post_id)
        self._invalidate_own_saved()

    async def comment(self, post_id: str, content: str) -> Dict[str, Any]:
        me = self._require_user()
        comment = await self.api.post(
            f"/api/posts/{post_id}/comments",
            json={"content": content.strip(), "authorId": me["id"]},
        )
        self._invalidate_comments(post_id)
        return comment

    async def delete_comment(self, comment_id: str, post_id: str) -> None:
        await self.api.delete(f"/api/comments/{comment_id}")
        self._invalidate_comments(post_id)

    async def follow(self, user_id: str) -> None:
        await self.api.post(f"/api/users/{user_id}/follow")
        self.cache.invalidate(("/api/users", user_id))

    async def unfollow(self, user_id: str) -> None:
        await self.api.delete(f"/api/users/{user_id}/follow")
        self.cache.invalidate(("/api/users", user_id))

    async def mark_notification_read(self, notification_id: str) -> None:
        await self.api.post(f"/api/notifications/{notification_id}/read")
        self.cache.invalidate(("/api/notifications",))

    async def mark_all_notifications_read(self) -> None:
        await self.api.post("/api/notifications/mark-all-read")
        self.cache.invalidate(("/api/notifications",))

    async def report(self, post_id: str, reason: str) -> Dict[str, Any]:
        me = self._require_user()
        return await self.api.post(
            "/api/reports", json={"postId": post_id, "reporterId": me["id"], "reason": reason}
        )

    # ── Invalidation groups ───────────────────────────────────────────────

    def _invalidate_post(self, post_id: str) -> None:
        self.cache.invalidate(("/api/posts", post_id))
        self.cache.invalidate(("/api/posts",))

    def _invalidate_comments(self, post_id: str) -> None:
        self.cache.invalidate(("/api/posts", post_id, "comments"))
        self.cache.invalidate(("/api/posts", post_id))

    def _invalidate_own_saved(self) -> None:
        if self.user:
            self.cache.invalidate(("/api/users", self.user["id"], "saved"))
