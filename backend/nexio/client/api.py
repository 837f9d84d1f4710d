"""
Nexio Client — Request Helper
==============================

What:  Thin wrapper over httpx.AsyncClient.
How:   Every request carries the current identity: `x-user-id` from the
       stored user, and `Authorization: Bearer` when a token is stored.
       Any non-2xx response raises ApiError with the server's message.

No retries and no timeouts beyond httpx's defaults.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import httpx

logger = logging.getLogger(__name__)

# Returns (user_id, token); either may be None
IdentityProvider = Callable[[], Awaitable[Tuple[Optional[str], Optional[str]]]]


class ApiError(Exception):
    """
    A non-2xx response.

    Attributes:
        status:  HTTP status code
        message: The `message` field of the error body, or the raw body text
    """

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"{status}: {message}")


async def _anonymous() -> Tuple[Optional[str], Optional[str]]:
    return None, None


class ApiClient:

    def __init__(
        self,
        base_url: str,
        identity: Optional[IdentityProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._identity = identity or _anonymous
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _headers(self) -> Dict[str, str]:
        user_id, token = await self._identity()
        headers = {}
        if user_id:
            headers["x-user-id"] = user_id
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON body.

        Raises:
            ApiError: the server answered with a non-2xx status
        """
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        response = await self._http.request(
            method, path, json=json, params=params or None, headers=await self._headers()
        )
        if response.is_error:
            raise ApiError(response.status_code, self._error_message(response))
        if not response.content:
            return None
        return response.json()

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return response.text or response.reason_phrase
