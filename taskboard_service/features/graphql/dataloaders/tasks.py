"""DataLoader for batch-loading the tasks of many projects.

One-to-many: each key is a project ID and each value is that project's task
list, ordered by task ID. A project without tasks resolves to an empty list,
never to NotFound.
"""

from __future__ import annotations

from taskboard_service.core.dataloader import Ok, Result
from taskboard_service.features.graphql.dataloaders.base import EntityDataLoader
from taskboard_service.features.tasks.models import Task
from taskboard_service.features.tasks.repository import get_task_repository


class TasksByProjectDataLoader(EntityDataLoader[int, list[Task]]):
    """Batch-loads task lists keyed by project ID (resolves ``Project.tasks``)."""

    name = "tasks_by_project"

    async def _batch_load(self, project_ids: list[int]) -> list[Result[list[Task]]]:
        grouped = await get_task_repository().group_by(self._session, Task.project_id, project_ids)
        return [Ok(grouped[project_id]) for project_id in project_ids]

    async def load(self, key: int) -> list[Task]:
        return await super().load(key) or []


__all__ = ["TasksByProjectDataLoader"]
