"""GraphQL types for projects.

``owner`` and ``tasks`` resolve through the request loaders, so listing N
projects with their owners and tasks costs one query per relation rather
than one per project.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Annotated

import strawberry
from strawberry.types import Info

from taskboard_service.features.graphql.context import GraphQLContext
from taskboard_service.features.graphql.types.base import DeleteSuccess, MutationError
from taskboard_service.features.graphql.types.users import UserType

if TYPE_CHECKING:
    from taskboard_service.features.graphql.types.tasks import TaskType
    from taskboard_service.features.projects.models import Project


@strawberry.type(name="Project", description="A project owned by one user")
class ProjectType:
    id: int
    name: str
    description: str | None
    owner_id: int
    created_at: datetime
    updated_at: datetime

    @strawberry.field(description="The owning user")
    async def owner(self, info: Info[GraphQLContext, None]) -> UserType | None:
        user = await info.context.loaders.users.load(self.owner_id)
        return UserType.from_model(user) if user else None

    @strawberry.field(description="Tasks in this project, ordered by ID")
    async def tasks(
        self, info: Info[GraphQLContext, None]
    ) -> list[Annotated["TaskType", strawberry.lazy("taskboard_service.features.graphql.types.tasks")]]:
        from taskboard_service.features.graphql.types.tasks import TaskType

        tasks = await info.context.loaders.tasks_by_project.load(self.id)
        return [TaskType.from_model(task) for task in tasks]

    @classmethod
    def from_model(cls, project: Project) -> ProjectType:
        """Convert SQLAlchemy model to GraphQL type."""
        return cls(
            id=project.id,
            name=project.name,
            description=project.description,
            owner_id=project.owner_id,
            created_at=project.created_at,
            updated_at=project.updated_at,
        )


@strawberry.input(description="Input for creating a project")
class CreateProjectInput:
    name: str
    description: str | None = None


@strawberry.input(description="Input for updating a project; omitted fields are unchanged")
class UpdateProjectInput:
    name: str | None = strawberry.UNSET
    description: str | None = strawberry.UNSET


@strawberry.type(description="Successful project mutation")
class ProjectSuccess:
    project: ProjectType


ProjectPayload = Annotated[
    ProjectSuccess | MutationError,
    strawberry.union(name="ProjectPayload", description="Result of a project mutation"),
]

DeleteProjectPayload = Annotated[
    DeleteSuccess | MutationError,
    strawberry.union(name="DeleteProjectPayload", description="Result of deleteProject"),
]


__all__ = [
    "CreateProjectInput",
    "DeleteProjectPayload",
    "ProjectPayload",
    "ProjectSuccess",
    "ProjectType",
    "UpdateProjectInput",
]
