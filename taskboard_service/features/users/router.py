"""API router for the users feature.

Endpoints:
    POST /users/register  - Create an account
    POST /users/login     - Exchange credentials for tokens
    POST /users/refresh   - Exchange a refresh token for a new pair
    GET  /users/profile   - Current user's profile
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard_service.core.dependencies.auth import AuthUserDep
from taskboard_service.core.dependencies.database import get_db_session
from taskboard_service.features.users.schemas import (
    RefreshRequest,
    TokenResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from taskboard_service.features.users.service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register an account",
    responses={409: {"description": "Username or email already in use"}},
)
async def register(
    payload: UserRegister,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> UserResponse:
    user = await UserService(session).register(payload)
    await session.commit()
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in",
    responses={401: {"description": "Invalid credentials"}},
)
async def login(
    payload: UserLogin,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> TokenResponse:
    tokens = await UserService(session).login(payload)
    return TokenResponse(access_token=tokens.access_token, refresh_token=tokens.refresh_token)


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Refresh tokens",
    responses={401: {"description": "Invalid or expired refresh token"}},
)
async def refresh(
    payload: RefreshRequest,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> TokenResponse:
    tokens = await UserService(session).refresh(payload.refresh_token)
    return TokenResponse(access_token=tokens.access_token, refresh_token=tokens.refresh_token)


@router.get(
    "/profile",
    response_model=UserResponse,
    summary="Current user's profile",
    responses={401: {"description": "Not authenticated"}, 404: {"description": "User not found"}},
)
async def profile(
    user: AuthUserDep,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> UserResponse:
    """Return the authenticated caller's profile."""
    account = await UserService(session).get_user(user.id)
    return UserResponse.model_validate(account)
