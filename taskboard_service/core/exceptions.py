"""Application exceptions rendered as RFC 7807 problem details.

Services raise these; ``app.exception_handlers`` turns them into HTTP
responses and the GraphQL layer maps them onto ``MutationError`` codes.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, ClassVar


class AppException(Exception):
    """Base application exception.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        type: Problem type identifier (``about:blank`` when unspecific).
        title: Short summary of the problem type.
        instance: URI reference for this occurrence, usually the request path.
        extra: Members merged into the problem body (e.g. ``field``).

    Example:
        raise AppException(
            status_code=404,
            detail="Project not found",
            type="project-not-found",
            instance="/api/v1/projects/42",
            extra={"project_id": 42},
        )
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, type={self.type!r}, detail={self.detail!r})"

    @staticmethod
    def _default_title(status_code: int) -> str:
        try:
            return HTTPStatus(status_code).phrase
        except ValueError:
            return "Error"


class _HTTPProblem(AppException):
    """AppException whose status, type and title are fixed per subclass."""

    status: ClassVar[HTTPStatus]
    default_type: ClassVar[str]
    default_title: ClassVar[str | None] = None

    def __init__(
        self,
        detail: str,
        type: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=int(self.status),
            detail=detail,
            type=type or self.default_type,
            title=self.default_title,
            instance=instance,
            extra=extra,
        )


class NotFoundException(_HTTPProblem):
    """A requested resource does not exist."""

    status = HTTPStatus.NOT_FOUND
    default_type = "not-found"


class ValidationException(_HTTPProblem):
    """Input rejected by a rule pydantic cannot express."""

    status = HTTPStatus.UNPROCESSABLE_ENTITY
    default_type = "validation-error"
    default_title = "Validation Error"


class UnauthorizedException(_HTTPProblem):
    """Missing, invalid or expired credentials.

    Example:
        raise UnauthorizedException(detail="Invalid credentials", type="invalid-credentials")
    """

    status = HTTPStatus.UNAUTHORIZED
    default_type = "unauthorized"


class ForbiddenException(_HTTPProblem):
    status = HTTPStatus.FORBIDDEN
    default_type = "forbidden"


class ConflictException(_HTTPProblem):
    """A write collides with existing state.

    Example:
        raise ConflictException(
            detail="Username already taken",
            type="user-exists",
            extra={"field": "username"},
        )
    """

    status = HTTPStatus.CONFLICT
    default_type = "conflict"


__all__ = [
    "AppException",
    "ConflictException",
    "ForbiddenException",
    "NotFoundException",
    "UnauthorizedException",
    "ValidationException",
]
