"""
Nexio Client — Persisted Session State
=======================================

What:  Stores the logged-in user and the onboarding flag in one JSON file.
How:   aiofiles for the file I/O; writes go to a temp file that replaces the
       original, so a crash mid-write never leaves half a file behind.

File layout (keys are fixed so existing installs keep their state):
    {
        "@knowledgehub_auth": {"user": {...}, "token": "..."},
        "@nexio_onboarding_complete": "true"
    }

The stored user record never contains a password; the server does not send
one.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import aiofiles
import aiofiles.os

logger = logging.getLogger(__name__)

AUTH_STORAGE_KEY = "@knowledgehub_auth"
ONBOARDING_STORAGE_KEY = "@nexio_onboarding_complete"


class SessionStore:

    def __init__(self, path: str):
        self.path = Path(path)

    async def _read(self) -> Dict[str, Any]:
        if not await aiofiles.os.path.exists(self.path):
            return {}
        async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
            raw = await f.read()
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Session file %s is corrupt; starting fresh", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    async def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(data))
        await aiofiles.os.replace(tmp_path, self.path)

    # ── Auth ──────────────────────────────────────────────────────────────

    async def load_auth(self) -> Optional[Dict[str, Any]]:
        """The stored {"user", "token"} record, or None when logged out."""
        auth = (await self._read()).get(AUTH_STORAGE_KEY)
        if not isinstance(auth, dict) or not isinstance(auth.get("user"), dict):
            return None
        return auth

    async def save_auth(self, user: Dict[str, Any], token: Optional[str] = None) -> None:
        data = await self._read()
        public_user = {k: v for k, v in user.items() if k != "password"}
        data[AUTH_STORAGE_KEY] = {"user": public_user, "token": token}
        await self._write(data)

    async def save_user(self, user: Dict[str, Any]) -> None:
        """Replace the stored user record, keeping the token."""
        auth = await self.load_auth()
        await self.save_auth(user, auth.get("token") if auth else None)

    async def clear_auth(self) -> None:
        data = await self._read()
        if data.pop(AUTH_STORAGE_KEY, None) is not None:
            await self._write(data)

    # ── Onboarding ────────────────────────────────────────────────────────

    async def is_onboarding_complete(self) -> bool:
        return (await self._read()).get(ONBOARDING_STORAGE_KEY) == "true"

    async def set_onboarding_complete(self) -> None:
        data = await self._read()
        data[ONBOARDING_STORAGE_KEY] = "true"
        await self._write(data)
