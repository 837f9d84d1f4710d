"""
Nexio Backend — Authentication Routes
======================================

    POST /api/auth/signup   create an account  → {"user", "token"}
    POST /api/auth/login    authenticate       → {"user", "token"}

The returned user never includes the password hash. The app stores the user
record and sends its id as `x-user-id`; newer clients send the token as a
bearer credential instead.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from nexio.database import commit_session, get_db_session
from nexio.schemas.auth import AuthResponse, LoginRequest, SignupRequest
from nexio.schemas.common import ErrorResponse
from nexio.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing fields or email already in use", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create an account",
)
async def signup(
    payload: SignupRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    response = await auth_service.signup(db, payload)
    await commit_session(db)
    return response


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        400: {"description": "Email or password missing", "model": ErrorResponse},
        401: {"description": "Invalid credentials", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Log in with email and password",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await auth_service.login(db, payload)
