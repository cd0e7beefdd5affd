"""Service layer for the users feature."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from taskboard_service.core.database import ConstraintViolationError, NotFoundError
from taskboard_service.core.exceptions import ConflictException, UnauthorizedException
from taskboard_service.core.security import (
    TokenPair,
    create_token_pair,
    decode_token,
    hash_password,
    verify_password,
)
from taskboard_service.features.users.models import User
from taskboard_service.features.users.repository import UserRepository, get_user_repository
from taskboard_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from taskboard_service.features.users.schemas import UserLogin, UserRegister

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)


class UserService:
    """Account registration and credential exchange.

    Flushes but never commits; the caller owns the transaction.
    """

    def __init__(self, session: AsyncSession, repo: UserRepository | None = None) -> None:
        self._session = session
        self._repo = repo or get_user_repository()

    async def register(self, payload: UserRegister) -> User:
        """Create an account.

        Raises:
            ConflictException: If the username or email is already taken
        """
        existing = await self._repo.find_conflicting(
            self._session, username=payload.username, email=payload.email,
        )
        if existing is not None:
            field = "username" if existing.username == payload.username else "email"
            raise ConflictException(
                detail="Username or email already in use",
                type="user-exists",
                extra={"field": field},
            )

        try:
            user = await self._repo.create(
                self._session,
                User(
                    username=payload.username,
                    email=payload.email,
                    password_hash=hash_password(payload.password),
                ),
            )
        except ConstraintViolationError as exc:
            # lost a race with a concurrent registration
            raise ConflictException(
                detail="Username or email already in use", type="user-exists",
            ) from exc
        logger.info("User registered", extra={"user_id": user.id, "operation": "users.register"})
        return user

    async def login(self, payload: UserLogin) -> TokenPair:
        """Exchange credentials for an access/refresh token pair.

        Raises:
            UnauthorizedException: On unknown email or wrong password. Both
                cases produce the same error.
        """
        user = await self._repo.get_by_email(self._session, payload.email)
        if user is None or not verify_password(payload.password, user.password_hash):
            logger.info("Login rejected", extra={"operation": "users.login"})
            raise UnauthorizedException(detail="Invalid credentials", type="invalid-credentials")

        lazy_logger.debug(lambda: f"service.login -> user_id={user.id}")
        return create_token_pair(user.id, user.role)

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Issue a fresh token pair for a valid refresh token."""
        claims = decode_token(refresh_token, "refresh")
        user = await self._repo.get(self._session, int(claims["sub"]))
        if user is None:
            raise UnauthorizedException(detail="Account no longer exists", type="invalid-token")
        return create_token_pair(user.id, user.role)

    async def get_user(self, user_id: int) -> User:
        """Get a user by ID.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = await self._repo.get(self._session, user_id)
        if user is None:
            raise NotFoundError("User", {"id": user_id})
        return user

    async def list_users(self, *, limit: int = 100, offset: int = 0) -> list[User]:
        return list(await self._repo.list(self._session, limit=limit, offset=offset))
