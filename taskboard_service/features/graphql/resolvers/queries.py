"""Query resolvers for the GraphQL API.

Root fields read through the services; nested relations (owner, tasks,
project, assignee) resolve through the request loaders on the types.
"""

from __future__ import annotations

import logging
from typing import Annotated

import strawberry
from strawberry.types import Info

from taskboard_service.core.database import NotFoundError
from taskboard_service.features.graphql.context import GraphQLContext
from taskboard_service.features.graphql.permissions import IsAdmin
from taskboard_service.features.graphql.types.projects import ProjectType
from taskboard_service.features.graphql.types.tasks import TaskType
from taskboard_service.features.graphql.types.users import UserType
from taskboard_service.features.projects.service import ProjectService
from taskboard_service.features.tasks.service import TaskService
from taskboard_service.features.users.service import UserService

logger = logging.getLogger(__name__)

LimitArg = Annotated[int, strawberry.argument(description="Maximum number of items")]
OffsetArg = Annotated[int, strawberry.argument(description="Number of items to skip")]

MAX_LIMIT = 500


@strawberry.type(description="Root query type")
class Query:
    """GraphQL Query resolvers."""

    @strawberry.field(description="All users (admin only)", permission_classes=[IsAdmin])
    async def users(
        self,
        info: Info[GraphQLContext, None],
        limit: LimitArg = 100,
        offset: OffsetArg = 0,
    ) -> list[UserType]:
        ctx = info.context
        async with ctx.loaders.db_lock:
            users = await UserService(ctx.session).list_users(
                limit=min(limit, MAX_LIMIT), offset=max(offset, 0),
            )
        for user in users:
            ctx.loaders.users.prime(user.id, user, force=False)
        return [UserType.from_model(user) for user in users]

    @strawberry.field(description="The authenticated user, or null")
    async def me(self, info: Info[GraphQLContext, None]) -> UserType | None:
        ctx = info.context
        if ctx.user is None:
            return None
        user = await ctx.loaders.users.load(ctx.user.id)
        return UserType.from_model(user) if user else None

    @strawberry.field(description="List projects, optionally by owner")
    async def projects(
        self,
        info: Info[GraphQLContext, None],
        owner_id: int | None = None,
        limit: LimitArg = 100,
        offset: OffsetArg = 0,
    ) -> list[ProjectType]:
        ctx = info.context
        async with ctx.loaders.db_lock:
            projects = await ProjectService(ctx.session).list_projects(
                owner_id=owner_id, limit=min(limit, MAX_LIMIT), offset=max(offset, 0),
            )
        # Tasks of these projects resolve Task.project from the memo
        for project in projects:
            ctx.loaders.projects.prime(project.id, project, force=False)
        return [ProjectType.from_model(project) for project in projects]

    @strawberry.field(description="Get a single project by ID")
    async def project(self, info: Info[GraphQLContext, None], id: int) -> ProjectType | None:
        project = await info.context.loaders.projects.load(id)
        return ProjectType.from_model(project) if project else None

    @strawberry.field(description="List tasks, optionally by project and/or assignee")
    async def tasks(
        self,
        info: Info[GraphQLContext, None],
        project_id: int | None = None,
        assignee_id: int | None = None,
        limit: LimitArg = 100,
        offset: OffsetArg = 0,
    ) -> list[TaskType]:
        ctx = info.context
        async with ctx.loaders.db_lock:
            tasks = await TaskService(ctx.session).list_tasks(
                project_id=project_id,
                assignee_id=assignee_id,
                limit=min(limit, MAX_LIMIT),
                offset=max(offset, 0),
            )
        return [TaskType.from_model(task) for task in tasks]

    @strawberry.field(description="Get a single task by ID")
    async def task(self, info: Info[GraphQLContext, None], id: int) -> TaskType | None:
        ctx = info.context
        async with ctx.loaders.db_lock:
            try:
                task = await TaskService(ctx.session).get_task(id)
            except NotFoundError:
                return None
        return TaskType.from_model(task)


__all__ = ["Query"]
