"""Database core: declarative base, mixins, repository and its errors."""

from taskboard_service.core.database.base import Base, IntegerPKMixin, TimestampMixin
from taskboard_service.core.database.exceptions import (
    ConstraintViolationError,
    NotFoundError,
    RepositoryError,
)
from taskboard_service.core.database.repository import BaseRepository

__all__ = [
    "Base",
    "BaseRepository",
    "ConstraintViolationError",
    "IntegerPKMixin",
    "NotFoundError",
    "RepositoryError",
    "TimestampMixin",
]
