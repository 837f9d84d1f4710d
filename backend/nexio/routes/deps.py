"""
Nexio Backend — Route Dependencies
===================================

What:  Resolves who is calling.
How:   1. `Authorization: Bearer <token>` → verified token subject; other
          schemes are ignored
       2. else `x-user-id` header (when settings.allow_header_identity)
       3. else anonymous (None)

    get_caller_id     → Optional[str]; for reads that annotate per caller
    require_caller_id → str; 401 when anonymous
    require_caller    → User row; 401 when anonymous or unknown
"""

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from nexio.config import settings
from nexio.database import get_db_session
from nexio.exceptions import AuthenticationError
from nexio.models import User
from nexio.security import decode_access_token
from nexio.services.auth_service import auth_service


async def get_caller_id(
    authorization: str | None = Header(default=None),
    x_user_id: str | None = Header(default=None),
) -> Optional[str]:
    if authorization:
        scheme, _, token = authorization.partition(" ")
        # Other schemes (Basic from a proxy) carry no Nexio identity
        if scheme.lower() == "bearer":
            if not token.strip():
                raise AuthenticationError(message="Invalid authorization header")
            return decode_access_token(token.strip())
    if settings.allow_header_identity and x_user_id:
        return x_user_id
    return None


async def require_caller_id(
    caller_id: Optional[str] = Depends(get_caller_id),
) -> str:
    if not caller_id:
        raise AuthenticationError()
    return caller_id


async def require_caller(
    caller_id: Optional[str] = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    return await auth_service.resolve_caller(db, caller_id)
