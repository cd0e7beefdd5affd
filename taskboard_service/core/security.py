"""Password hashing and JWT issuance/verification.

Access tokens carry ``{sub, role, type="access", iat, exp}`` and are signed
with ``AUTH_JWT_SECRET``. Refresh tokens carry ``{sub, type="refresh", iat,
exp}`` and are signed with the separate ``AUTH_JWT_REFRESH_SECRET``, so one
can never be presented as the other.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Literal

import jwt
from passlib.context import CryptContext

from taskboard_service.core.exceptions import UnauthorizedException
from taskboard_service.core.settings import get_auth_settings

if TYPE_CHECKING:
    from taskboard_service.core.settings import AuthSettings

TokenType = Literal["access", "refresh"]

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a plaintext password for storage."""
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored hash."""
    return pwd_context.verify(password, password_hash)


@dataclass(frozen=True, slots=True)
class TokenPair:
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


@dataclass(frozen=True, slots=True)
class AuthUser:
    """Authenticated caller as asserted by a valid access token."""

    id: int
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def _encode(claims: dict[str, Any], secret: str, settings: AuthSettings) -> str:
    return jwt.encode(claims, secret, algorithm=settings.jwt_algorithm)


def create_access_token(user_id: int, role: str, settings: AuthSettings | None = None) -> str:
    """Issue a short-lived access token."""
    settings = settings or get_auth_settings()
    now = datetime.now(UTC)
    claims = {
        "sub": str(user_id),
        "role": role,
        "type": "access",
        "iat": now,
        "exp": now + settings.access_token_ttl,
    }
    return _encode(claims, settings.jwt_secret.get_secret_value(), settings)


def create_refresh_token(user_id: int, settings: AuthSettings | None = None) -> str:
    """Issue a long-lived refresh token."""
    settings = settings or get_auth_settings()
    now = datetime.now(UTC)
    claims = {
        "sub": str(user_id),
        "type": "refresh",
        "iat": now,
        "exp": now + settings.refresh_token_ttl,
    }
    return _encode(claims, settings.jwt_refresh_secret.get_secret_value(), settings)


def create_token_pair(user_id: int, role: str, settings: AuthSettings | None = None) -> TokenPair:
    settings = settings or get_auth_settings()
    return TokenPair(
        access_token=create_access_token(user_id, role, settings),
        refresh_token=create_refresh_token(user_id, settings),
    )


def decode_token(
    token: str,
    token_type: TokenType = "access",
    settings: AuthSettings | None = None,
) -> dict[str, Any]:
    """Verify a token's signature, expiry and type.

    Args:
        token: Encoded JWT
        token_type: Expected ``type`` claim, which also selects the secret
        settings: Auth settings (defaults to the cached settings)

    Returns:
        Verified claims

    Raises:
        UnauthorizedException: If the token is expired, malformed, signed with
            the wrong secret, or of the wrong type.
    """
    settings = settings or get_auth_settings()
    secret = settings.jwt_secret if token_type == "access" else settings.jwt_refresh_secret

    try:
        claims = jwt.decode(
            token,
            secret.get_secret_value(),
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp", "type"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise UnauthorizedException(detail="Token has expired", type="token-expired") from exc
    except jwt.InvalidTokenError as exc:
        raise UnauthorizedException(detail="Invalid token", type="invalid-token") from exc

    if claims.get("type") != token_type:
        raise UnauthorizedException(
            detail=f"Expected a {token_type} token",
            type="invalid-token",
            extra={"token_type": claims.get("type")},
        )
    if not str(claims["sub"]).isdigit():
        raise UnauthorizedException(detail="Invalid token subject", type="invalid-token")
    return claims


def user_from_access_token(token: str, settings: AuthSettings | None = None) -> AuthUser:
    claims = decode_token(token, "access", settings)
    return AuthUser(id=int(claims["sub"]), role=str(claims.get("role", "user")))


__all__ = [
    "AuthUser",
    "TokenPair",
    "create_access_token",
    "create_refresh_token",
    "create_token_pair",
    "decode_token",
    "hash_password",
    "pwd_context",
    "user_from_access_token",
    "verify_password",
]
