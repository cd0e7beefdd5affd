"""SQLAlchemy models for the users feature."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from taskboard_service.core.database import Base, IntegerPKMixin, TimestampMixin


class User(Base, IntegerPKMixin, TimestampMixin):
    """Registered account.

    Owns projects and may be assigned tasks. ``role`` is ``"user"`` or
    ``"admin"``; admins bypass ownership checks.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="user", server_default="user")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username!r})>"
