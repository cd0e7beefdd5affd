"""SQLAlchemy models for the projects feature."""

from __future__ import annotations

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from taskboard_service.core.database import Base, IntegerPKMixin, TimestampMixin


class Project(Base, IntegerPKMixin, TimestampMixin):
    """A project owned by one user and holding many tasks.

    Related rows are resolved through the request loaders rather than ORM
    relationships, so the model carries foreign keys only.
    """

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name={self.name!r}, owner_id={self.owner_id})>"
