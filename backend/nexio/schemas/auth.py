"""
Nexio Backend — Authentication Schemas
=======================================

Fields are optional at the schema level; AuthService performs the presence
checks so a missing or empty field gets the same 400 message either way.
"""

from typing import Optional

from nexio.schemas.common import CamelModel
from nexio.schemas.user import UserResponse


class SignupRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AuthResponse(CamelModel):
    """
    Returned by signup and login.

    token: Bearer token for the Authorization header. Clients that only send
           `x-user-id` can ignore it.
    """
    user: UserResponse
    token: str
