"""Authentication dependencies for bearer access tokens.

Usage:
    from taskboard_service.core.dependencies.auth import AuthUserDep, OptionalAuthUser

    @router.get("/profile")
    async def get_profile(user: AuthUserDep):
        return {"user_id": user.id}

    @router.get("/public-or-private")
    async def optional_endpoint(user: OptionalAuthUser):
        return {"authenticated": user is not None}
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from taskboard_service.core.exceptions import UnauthorizedException
from taskboard_service.core.security import AuthUser, user_from_access_token
from taskboard_service.infra.logging import set_log_context

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> AuthUser:
    """Resolve the caller from the ``Authorization: Bearer`` header.

    Raises:
        UnauthorizedException: If the header is missing or the token is invalid
    """
    if credentials is None:
        raise UnauthorizedException(
            detail="Authorization header missing",
            type="missing-credentials",
            instance=str(request.url.path),
        )

    user = user_from_access_token(credentials.credentials)
    request.state.user = user
    set_log_context(user_id=user.id)
    return user


async def get_current_user_optional(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> AuthUser | None:
    """Like ``get_current_user`` but returns None instead of raising."""
    if credentials is None:
        return None
    try:
        user = user_from_access_token(credentials.credentials)
    except UnauthorizedException as exc:
        logger.debug("Ignoring invalid optional credentials", extra={"reason": exc.type})
        return None

    request.state.user = user
    set_log_context(user_id=user.id)
    return user


AuthUserDep = Annotated[AuthUser, Depends(get_current_user)]
"""Authenticated caller; HTTP 401 when missing or invalid."""

OptionalAuthUser = Annotated[AuthUser | None, Depends(get_current_user_optional)]
"""Authenticated caller or None."""


__all__ = [
    "AuthUserDep",
    "OptionalAuthUser",
    "bearer_scheme",
    "get_current_user",
    "get_current_user_optional",
]
