"""Errors raised by repositories.

These sit below the HTTP layer: the REST exception handlers and the GraphQL
mutation payloads decide how each one is shown to a client.
"""

from __future__ import annotations

from typing import Any


class RepositoryError(Exception):
    """Base class for repository failures.

    Attributes:
        message: Description without the details suffix
        details: Structured context, safe to put in log ``extra``
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        pairs = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} ({pairs})"


class NotFoundError(RepositoryError):
    """No row matched the lookup.

    Args:
        model_name: Mapped class name, e.g. ``"Project"``
        identifier: Lookup columns and values, e.g. ``{"id": 42}``
    """

    def __init__(self, model_name: str, identifier: dict[str, Any]) -> None:
        self.model_name = model_name
        self.identifier = identifier
        lookup = ", ".join(f"{key}={value!r}" for key, value in identifier.items())
        super().__init__(
            f"{model_name} not found with {lookup}",
            details={"model": model_name, **identifier},
        )

    def __repr__(self) -> str:
        return f"NotFoundError(model={self.model_name!r}, identifier={self.identifier!r})"


class ConstraintViolationError(RepositoryError):
    """A flush was rejected by a database constraint (unique, foreign key, not null).

    Raised in place of SQLAlchemy's ``IntegrityError``; the session must be
    rolled back before it is used again.
    """

    def __init__(self, model_name: str, reason: str) -> None:
        self.model_name = model_name
        self.reason = reason
        super().__init__(
            f"{model_name} violates a database constraint",
            details={"model": model_name, "reason": reason},
        )


__all__ = ["ConstraintViolationError", "NotFoundError", "RepositoryError"]
