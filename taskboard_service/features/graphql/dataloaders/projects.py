"""DataLoader for batch-loading projects by ID."""

from __future__ import annotations

from taskboard_service.core.dataloader import Result, to_result
from taskboard_service.features.graphql.dataloaders.base import EntityDataLoader
from taskboard_service.features.projects.models import Project
from taskboard_service.features.projects.repository import get_project_repository


class ProjectDataLoader(EntityDataLoader[int, Project]):
    """Batch-loads projects by ID (resolves ``Task.project``)."""

    name = "projects"

    async def _batch_load(self, ids: list[int]) -> list[Result[Project]]:
        projects = await get_project_repository().get_many_by_ids(self._session, ids)
        return [to_result(id_, project) for id_, project in zip(ids, projects, strict=True)]


__all__ = ["ProjectDataLoader"]
