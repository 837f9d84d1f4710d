"""
Nexio Backend — Authentication Service
=======================================

What:  Signup, login and resolving the caller's identity to a user row.
How:   bcrypt hashes (nexio.security) and signed access tokens. Both signup
       and login return the public user record plus a token. Hashing and
       checking run in the threadpool; bcrypt holds the CPU for each call.

Login failures:
    Unknown email and wrong password produce the same 401 "Invalid
    credentials" so the response does not reveal which accounts exist.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from nexio.exceptions import AuthenticationError, ValidationError
from nexio.models import User
from nexio.schemas.auth import AuthResponse, LoginRequest, SignupRequest
from nexio.schemas.user import UserResponse
from nexio.security import create_access_token, hash_password, verify_password
from nexio.services.storage import storage

logger = logging.getLogger(__name__)


class AuthService:

    async def signup(self, db: AsyncSession, payload: SignupRequest) -> AuthResponse:
        """
        Create an account.

        Raises:
            ValidationError: missing name/email/password, email already in
                             use, or a password bcrypt cannot hash (>72 bytes)
        """
        if not (payload.name and payload.email and payload.password):
            raise ValidationError(message="Name, email, and password are required")

        if await storage.get_user_by_email(db, payload.email) is not None:
            raise ValidationError(message="Email already in use", field="email")

        password_hash = await run_in_threadpool(hash_password, payload.password)
        user = await storage.create_user(
            db,
            name=payload.name,
            email=payload.email,
            password_hash=password_hash,
        )
        logger.info("User %s signed up", user.id)
        return self._auth_response(user)

    async def login(self, db: AsyncSession, payload: LoginRequest) -> AuthResponse:
        if not (payload.email and payload.password):
            raise ValidationError(message="Email and password are required")

        user = await storage.get_user_by_email(db, payload.email)
        if user is None or not await run_in_threadpool(
            verify_password, payload.password, user.password
        ):
            logger.info("Failed login attempt")
            raise AuthenticationError(message="Invalid credentials")

        logger.info("User %s logged in", user.id)
        return self._auth_response(user)

    async def resolve_caller(self, db: AsyncSession, caller_id: Optional[str]) -> User:
        """
        Load the user behind a required identity.

        Raises:
            AuthenticationError: no identity, or it names no user
        """
        if not caller_id:
            raise AuthenticationError()
        user = await storage.get_user(db, caller_id)
        if user is None:
            raise AuthenticationError(context={"caller_id": caller_id})
        return user

    def _auth_response(self, user: User) -> AuthResponse:
        return AuthResponse(
            user=UserResponse.model_validate(user),
            token=create_access_token(user.id),
        )


auth_service = AuthService()
