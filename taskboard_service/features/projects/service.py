"""Service layer for the projects feature."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from taskboard_service.core.database import NotFoundError
from taskboard_service.core.exceptions import ForbiddenException
from taskboard_service.features.projects.models import Project
from taskboard_service.features.projects.repository import (
    ProjectRepository,
    get_project_repository,
)
from taskboard_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from taskboard_service.core.security import AuthUser
    from taskboard_service.features.projects.schemas import ProjectCreate, ProjectUpdate

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)


def ensure_project_owner(project: Project, user: AuthUser) -> None:
    """Allow only the project owner or an admin.

    Raises:
        ForbiddenException: If ``user`` is neither
    """
    if project.owner_id != user.id and not user.is_admin:
        raise ForbiddenException(
            detail="Only the project owner or an admin may modify this project",
            extra={"project_id": project.id},
        )


class ProjectService:
    """Project CRUD with ownership checks.

    Flushes but never commits; the caller owns the transaction.
    """

    def __init__(self, session: AsyncSession, repo: ProjectRepository | None = None) -> None:
        self._session = session
        self._repo = repo or get_project_repository()

    async def list_projects(
        self,
        *,
        owner_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Sequence[Project]:
        return await self._repo.list_filtered(
            self._session, owner_id=owner_id, limit=limit, offset=offset,
        )

    async def get_project(self, project_id: int) -> Project:
        """Get a project by ID.

        Raises:
            NotFoundError: If the project does not exist
        """
        project = await self._repo.get(self._session, project_id)
        if project is None:
            raise NotFoundError("Project", {"id": project_id})
        return project

    async def create_project(self, payload: ProjectCreate, user: AuthUser) -> Project:
        project = await self._repo.create(
            self._session,
            Project(name=payload.name, description=payload.description, owner_id=user.id),
        )
        logger.info(
            "Project created",
            extra={"project_id": project.id, "owner_id": user.id, "operation": "projects.create"},
        )
        return project

    async def update_project(
        self,
        project_id: int,
        payload: ProjectUpdate,
        user: AuthUser,
    ) -> Project:
        """Update a project.

        Raises:
            NotFoundError: If the project does not exist
            ForbiddenException: If the caller is not the owner or an admin
        """
        project = await self.get_project(project_id)
        ensure_project_owner(project, user)

        values = payload.model_dump(exclude_unset=True)
        project = await self._repo.update(self._session, project, values)
        lazy_logger.debug(lambda: f"service.update_project({project_id}) fields={sorted(values)}")
        return project

    async def delete_project(self, project_id: int, user: AuthUser) -> Project:
        """Delete a project and, through the FK cascade, its tasks.

        Returns:
            The deleted project (detached)
        """
        project = await self.get_project(project_id)
        ensure_project_owner(project, user)

        # Tasks are removed explicitly so SQLite without FK enforcement agrees
        from taskboard_service.features.tasks.repository import get_task_repository

        await get_task_repository().delete_for_project(self._session, project_id)
        await self._repo.delete(self._session, project)
        return project
