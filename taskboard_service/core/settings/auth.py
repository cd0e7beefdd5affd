"""Authentication settings for JWT issuance and verification."""

from __future__ import annotations

from datetime import timedelta

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings

from ._config import env_config


class AuthSettings(BaseSettings):
    """JWT signing configuration.

    Environment variables use AUTH_ prefix.
    Example: AUTH_JWT_SECRET=..., AUTH_ACCESS_TOKEN_TTL_MINUTES=30
    """

    jwt_secret: SecretStr = Field(
        default=SecretStr("change-me-access-secret"),
        description="HMAC secret for access tokens",
    )
    jwt_refresh_secret: SecretStr = Field(
        default=SecretStr("change-me-refresh-secret"),
        description="HMAC secret for refresh tokens (must differ from jwt_secret)",
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    access_token_ttl_minutes: int = Field(
        default=15, ge=1, le=24 * 60, description="Access token lifetime in minutes",
    )
    refresh_token_ttl_days: int = Field(
        default=7, ge=1, le=365, description="Refresh token lifetime in days",
    )

    @model_validator(mode="after")
    def validate_distinct_secrets(self) -> AuthSettings:
        """Refresh tokens must not verify as access tokens."""
        if self.jwt_secret.get_secret_value() == self.jwt_refresh_secret.get_secret_value():
            msg = "jwt_secret and jwt_refresh_secret must differ"
            raise ValueError(msg)
        return self

    @property
    def access_token_ttl(self) -> timedelta:
        return timedelta(minutes=self.access_token_ttl_minutes)

    @property
    def refresh_token_ttl(self) -> timedelta:
        return timedelta(days=self.refresh_token_ttl_days)

    model_config = env_config("AUTH_")
