"""Repository for the tasks feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import delete, select

from taskboard_service.core.database.repository import BaseRepository
from taskboard_service.features.tasks.models import Task

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession


class TaskRepository(BaseRepository[Task]):
    """Repository for Task model."""

    def __init__(self) -> None:
        super().__init__(Task)

    async def list_filtered(
        self,
        session: AsyncSession,
        *,
        project_id: int | None = None,
        assignee_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Sequence[Task]:
        """List tasks, optionally narrowed to a project and/or assignee."""
        stmt = select(Task).order_by(Task.id).limit(limit).offset(offset)
        if project_id is not None:
            stmt = stmt.where(Task.project_id == project_id)
        if assignee_id is not None:
            stmt = stmt.where(Task.assignee_id == assignee_id)
        result = await session.execute(stmt)
        tasks = result.scalars().all()

        self._lazy.debug(
            lambda: f"db.list_filtered(project_id={project_id}, assignee_id={assignee_id}) -> {len(tasks)} tasks"
        )
        return tasks

    async def delete_for_project(self, session: AsyncSession, project_id: int) -> int:
        """Delete every task of a project.

        Returns:
            Number of deleted rows
        """
        result = await session.execute(delete(Task).where(Task.project_id == project_id))
        count = result.rowcount or 0
        self._logger.info(
            "Project tasks deleted",
            extra={"project_id": project_id, "deleted": count, "operation": "db.delete_for_project"},
        )
        return count


_task_repository: TaskRepository | None = None


def get_task_repository() -> TaskRepository:
    global _task_repository
    if _task_repository is None:
        _task_repository = TaskRepository()
    return _task_repository
