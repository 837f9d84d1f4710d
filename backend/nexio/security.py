"""
Nexio Backend — Password Hashing and Access Tokens
===================================================

What:  bcrypt password hashing and signed (JWT) access tokens.
Who:   AuthService (signup/login) and the caller-identity dependency.

Passwords:
    bcrypt with `settings.bcrypt_rounds` (default 10). bcrypt only reads the
    first 72 bytes of a password; longer passwords are rejected at signup
    instead of being silently truncated.

Tokens:
    HS256 JWT with `sub` = user id and `exp` = now + configured expiry.
    The `x-user-id` header stays accepted (see settings.allow_header_identity);
    a bearer token, when sent, is the stronger claim and wins.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from nexio.config import settings
from nexio.exceptions import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise ValidationError(
            message=f"Password must be at most {BCRYPT_MAX_BYTES} bytes long",
            field="password",
        )
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(encoded, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    encoded = plain_password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Password check against a malformed hash")
        return False


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a signed token whose subject is the user id."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode = {"sub": user_id, "exp": expire}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> str:
    """
    Verify a token and return its subject.

    Raises:
        AuthenticationError: bad signature, expired, or no subject
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise AuthenticationError(
            message="Invalid or expired token",
            context={"reason": type(e).__name__},
        )
    subject = payload.get("sub")
    if not subject:
        raise AuthenticationError(message="Invalid or expired token")
    return subject
