"""Repository for the projects feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from taskboard_service.core.database.repository import BaseRepository
from taskboard_service.features.projects.models import Project

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project model."""

    def __init__(self) -> None:
        super().__init__(Project)

    async def list_filtered(
        self,
        session: AsyncSession,
        *,
        owner_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Sequence[Project]:
        stmt = select(Project).order_by(Project.id).limit(limit).offset(offset)
        if owner_id is not None:
            stmt = stmt.where(Project.owner_id == owner_id)
        result = await session.execute(stmt)
        projects = result.scalars().all()

        self._lazy.debug(
            lambda: f"db.list_filtered(owner_id={owner_id}) -> {len(projects)} projects"
        )
        return projects


_project_repository: ProjectRepository | None = None


def get_project_repository() -> ProjectRepository:
    global _project_repository
    if _project_repository is None:
        _project_repository = ProjectRepository()
    return _project_repository
