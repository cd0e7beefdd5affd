"""Shared GraphQL types for mutation results."""

from __future__ import annotations

import logging
from enum import Enum

import strawberry

from taskboard_service.core.database import NotFoundError
from taskboard_service.core.exceptions import (
    AppException,
    ConflictException,
    ForbiddenException,
    UnauthorizedException,
)

logger = logging.getLogger(__name__)


@strawberry.enum(description="Error codes for mutation responses")
class ErrorCode(Enum):
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFLICT = "CONFLICT"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"


@strawberry.type(description="Error result from a mutation")
class MutationError:
    """Error payload for mutations.

    Domain failures are returned as data rather than GraphQL errors so
    clients can branch on ``code``.
    """

    code: ErrorCode = strawberry.field(description="Error code")
    message: str = strawberry.field(description="Human-readable error message")
    field: str | None = strawberry.field(default=None, description="Offending input field")

    @classmethod
    def from_exception(cls, exc: AppException | NotFoundError) -> MutationError:
        """Map a domain exception onto an error payload."""
        if isinstance(exc, NotFoundError):
            return cls(code=ErrorCode.NOT_FOUND, message=str(exc.message))

        code = {
            ConflictException: ErrorCode.CONFLICT,
            UnauthorizedException: ErrorCode.UNAUTHORIZED,
            ForbiddenException: ErrorCode.FORBIDDEN,
        }.get(type(exc), ErrorCode.VALIDATION_ERROR)
        if exc.status_code == 404:
            code = ErrorCode.NOT_FOUND
        return cls(code=code, message=exc.detail, field=exc.extra.get("field"))


@strawberry.type(description="Result of a delete operation")
class DeleteSuccess:
    id: int = strawberry.field(description="ID of the deleted entity")


__all__ = ["DeleteSuccess", "ErrorCode", "MutationError"]
