"""GraphQL types for tasks."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Annotated

import strawberry
from strawberry.types import Info

from taskboard_service.features.graphql.context import GraphQLContext
from taskboard_service.features.graphql.types.base import DeleteSuccess, MutationError
from taskboard_service.features.graphql.types.users import UserType

if TYPE_CHECKING:
    from taskboard_service.features.graphql.types.projects import ProjectType
    from taskboard_service.features.tasks.models import Task


@strawberry.type(name="Task", description="A unit of work inside a project")
class TaskType:
    id: int
    title: str
    description: str | None
    completed: bool
    project_id: int
    assignee_id: int | None
    created_at: datetime
    updated_at: datetime

    @strawberry.field(description="The project this task belongs to")
    async def project(
        self, info: Info[GraphQLContext, None]
    ) -> Annotated["ProjectType", strawberry.lazy("taskboard_service.features.graphql.types.projects")] | None:
        from taskboard_service.features.graphql.types.projects import ProjectType

        project = await info.context.loaders.projects.load(self.project_id)
        return ProjectType.from_model(project) if project else None

    @strawberry.field(description="The assigned user, if any")
    async def assignee(self, info: Info[GraphQLContext, None]) -> UserType | None:
        if self.assignee_id is None:
            return None
        user = await info.context.loaders.users.load(self.assignee_id)
        return UserType.from_model(user) if user else None

    @classmethod
    def from_model(cls, task: Task) -> TaskType:
        """Convert SQLAlchemy model to GraphQL type."""
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            completed=task.completed,
            project_id=task.project_id,
            assignee_id=task.assignee_id,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


@strawberry.input(description="Input for creating a task")
class CreateTaskInput:
    title: str
    project_id: int
    description: str | None = None
    assignee_id: int | None = None


@strawberry.input(description="Input for updating a task; omitted fields are unchanged")
class UpdateTaskInput:
    title: str | None = strawberry.UNSET
    description: str | None = strawberry.UNSET
    completed: bool | None = strawberry.UNSET
    assignee_id: int | None = strawberry.UNSET


@strawberry.type(description="Successful task mutation")
class TaskSuccess:
    task: TaskType


TaskPayload = Annotated[
    TaskSuccess | MutationError,
    strawberry.union(name="TaskPayload", description="Result of a task mutation"),
]

DeleteTaskPayload = Annotated[
    DeleteSuccess | MutationError,
    strawberry.union(name="DeleteTaskPayload", description="Result of deleteTask"),
]


__all__ = [
    "CreateTaskInput",
    "DeleteTaskPayload",
    "TaskPayload",
    "TaskSuccess",
    "TaskType",
    "UpdateTaskInput",
]
