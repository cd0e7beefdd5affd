"""Service layer for the tasks feature."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from taskboard_service.core.database import NotFoundError
from taskboard_service.core.exceptions import ForbiddenException
from taskboard_service.features.projects.repository import (
    ProjectRepository,
    get_project_repository,
)
from taskboard_service.features.tasks.models import Task
from taskboard_service.features.tasks.repository import TaskRepository, get_task_repository
from taskboard_service.features.users.repository import UserRepository, get_user_repository
from taskboard_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from taskboard_service.core.security import AuthUser
    from taskboard_service.features.tasks.schemas import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)


class TaskService:
    """Task CRUD with assignee/owner checks.

    A task may be modified by its assignee, the owner of its project, or an
    admin. Flushes but never commits; the caller owns the transaction.
    """

    def __init__(
        self,
        session: AsyncSession,
        repo: TaskRepository | None = None,
        projects: ProjectRepository | None = None,
        users: UserRepository | None = None,
    ) -> None:
        self._session = session
        self._repo = repo or get_task_repository()
        self._projects = projects or get_project_repository()
        self._users = users or get_user_repository()

    async def list_tasks(
        self,
        *,
        project_id: int | None = None,
        assignee_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Sequence[Task]:
        return await self._repo.list_filtered(
            self._session,
            project_id=project_id,
            assignee_id=assignee_id,
            limit=limit,
            offset=offset,
        )

    async def get_task(self, task_id: int) -> Task:
        """Get a task by ID.

        Raises:
            NotFoundError: If the task does not exist
        """
        task = await self._repo.get(self._session, task_id)
        if task is None:
            raise NotFoundError("Task", {"id": task_id})
        return task

    async def create_task(self, payload: TaskCreate, user: AuthUser) -> Task:
        """Create a task in an existing project.

        Raises:
            NotFoundError: If the project or the assignee does not exist
        """
        await self._projects.get_or_raise(self._session, payload.project_id)
        if payload.assignee_id is not None:
            await self._users.get_or_raise(self._session, payload.assignee_id)

        task = await self._repo.create(
            self._session,
            Task(
                title=payload.title,
                description=payload.description,
                project_id=payload.project_id,
                assignee_id=payload.assignee_id,
            ),
        )
        logger.info(
            "Task created",
            extra={
                "task_id": task.id,
                "project_id": task.project_id,
                "created_by": user.id,
                "operation": "tasks.create",
            },
        )
        return task

    async def update_task(self, task_id: int, payload: TaskUpdate, user: AuthUser) -> Task:
        """Update a task.

        Raises:
            NotFoundError: If the task or a new assignee does not exist
            ForbiddenException: If the caller may not modify the task
        """
        task = await self.get_task(task_id)
        await self._ensure_can_modify(task, user)

        values = payload.model_dump(exclude_unset=True)
        if values.get("assignee_id") is not None:
            await self._users.get_or_raise(self._session, values["assignee_id"])

        task = await self._repo.update(self._session, task, values)
        lazy_logger.debug(lambda: f"service.update_task({task_id}) fields={sorted(values)}")
        return task

    async def delete_task(self, task_id: int, user: AuthUser) -> Task:
        """Delete a task.

        Returns:
            The deleted task (detached)
        """
        task = await self.get_task(task_id)
        await self._ensure_can_modify(task, user)
        await self._repo.delete(self._session, task)
        return task

    async def _ensure_can_modify(self, task: Task, user: AuthUser) -> None:
        if user.is_admin or task.assignee_id == user.id:
            return
        project = await self._projects.get(self._session, task.project_id)
        if project is not None and project.owner_id == user.id:
            return
        raise ForbiddenException(
            detail="Only the assignee, the project owner or an admin may modify this task",
            extra={"task_id": task.id},
        )
