"""GraphQL types for users."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Annotated

import strawberry

from taskboard_service.features.graphql.types.base import MutationError

if TYPE_CHECKING:
    from taskboard_service.features.users.models import User


@strawberry.type(name="User", description="A registered account")
class UserType:
    id: int
    username: str
    email: str
    role: str
    created_at: datetime

    @classmethod
    def from_model(cls, user: User) -> UserType:
        """Convert SQLAlchemy model to GraphQL type."""
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            created_at=user.created_at,
        )


@strawberry.input(description="Input for register")
class RegisterInput:
    username: str
    email: str
    password: str


@strawberry.input(description="Input for login")
class LoginInput:
    email: str
    password: str


@strawberry.type(description="Access and refresh tokens")
class AuthTokens:
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


@strawberry.type(description="Successful registration")
class RegisterSuccess:
    user: UserType


@strawberry.type(description="Successful login")
class LoginSuccess:
    tokens: AuthTokens


RegisterPayload = Annotated[
    RegisterSuccess | MutationError,
    strawberry.union(name="RegisterPayload", description="Result of register"),
]

LoginPayload = Annotated[
    LoginSuccess | MutationError,
    strawberry.union(name="LoginPayload", description="Result of login"),
]


__all__ = [
    "AuthTokens",
    "LoginInput",
    "LoginPayload",
    "LoginSuccess",
    "RegisterInput",
    "RegisterPayload",
    "RegisterSuccess",
    "UserType",
]
