"""Mutation resolvers for the GraphQL API.

Provides write operations for the taskboard:
- register / login: account creation and token issue
- createProject / updateProject / deleteProject
- createTask / updateTask / deleteTask

Domain failures come back as ``MutationError`` payloads. Every successful
write commits and then adjusts the request loaders so later fields in the
same operation observe the change. Creations are then published to
subscribers of ``newProject`` and ``newTask``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import strawberry
from pydantic import ValidationError
from strawberry.types import Info

from taskboard_service.core.database import NotFoundError
from taskboard_service.core.exceptions import AppException, UnauthorizedException
from taskboard_service.features.graphql.context import GraphQLContext
from taskboard_service.features.graphql.events import Topic, get_event_broker
from taskboard_service.features.graphql.permissions import IsAuthenticated
from taskboard_service.features.graphql.types.base import DeleteSuccess, ErrorCode, MutationError
from taskboard_service.features.graphql.types.projects import (
    CreateProjectInput,
    DeleteProjectPayload,
    ProjectPayload,
    ProjectSuccess,
    ProjectType,
    UpdateProjectInput,
)
from taskboard_service.features.graphql.types.tasks import (
    CreateTaskInput,
    DeleteTaskPayload,
    TaskPayload,
    TaskSuccess,
    TaskType,
    UpdateTaskInput,
)
from taskboard_service.features.graphql.types.users import (
    AuthTokens,
    LoginInput,
    LoginPayload,
    LoginSuccess,
    RegisterInput,
    RegisterPayload,
    RegisterSuccess,
    UserType,
)
from taskboard_service.features.projects.schemas import ProjectCreate, ProjectUpdate
from taskboard_service.features.projects.service import ProjectService
from taskboard_service.features.tasks.schemas import TaskCreate, TaskUpdate
from taskboard_service.features.tasks.service import TaskService
from taskboard_service.features.users.schemas import UserLogin, UserRegister
from taskboard_service.features.users.service import UserService

if TYPE_CHECKING:
    from taskboard_service.core.security import AuthUser

logger = logging.getLogger(__name__)

_DOMAIN_ERRORS = (AppException, NotFoundError)


def _set_fields(data: object) -> dict[str, Any]:
    """Return the input fields the client actually sent."""
    return {
        name: value
        for name, value in vars(data).items()
        if value is not strawberry.UNSET
    }


def _validation_error(exc: ValidationError) -> MutationError:
    first = exc.errors()[0]
    loc = first.get("loc") or ()
    return MutationError(
        code=ErrorCode.VALIDATION_ERROR,
        message=first.get("msg", "Invalid input"),
        field=str(loc[0]) if loc else None,
    )


def _current_user(info: Info[GraphQLContext, None]) -> AuthUser:
    user = info.context.user
    if user is None:
        raise UnauthorizedException(detail="Authentication required")
    return user


@strawberry.type(description="Root mutation type")
class Mutation:
    """GraphQL Mutation resolvers."""

    @strawberry.mutation(description="Create an account")
    async def register(
        self,
        info: Info[GraphQLContext, None],
        input: RegisterInput,
    ) -> RegisterPayload:
        """Register a new user.

        Args:
            info: Strawberry info with context
            input: Username, email and password

        Returns:
            RegisterSuccess with the new user, or MutationError
        """
        ctx = info.context
        try:
            payload = UserRegister(
                username=input.username, email=input.email, password=input.password,
            )
        except ValidationError as exc:
            return _validation_error(exc)

        async with ctx.loaders.db_lock:
            try:
                user = await UserService(ctx.session).register(payload)
                await ctx.session.commit()
            except _DOMAIN_ERRORS as exc:
                await ctx.session.rollback()
                return MutationError.from_exception(exc)

        ctx.loaders.users.prime(user.id, user)
        return RegisterSuccess(user=UserType.from_model(user))

    @strawberry.mutation(description="Exchange credentials for tokens")
    async def login(
        self,
        info: Info[GraphQLContext, None],
        input: LoginInput,
    ) -> LoginPayload:
        ctx = info.context
        try:
            payload = UserLogin(email=input.email, password=input.password)
        except ValidationError as exc:
            return _validation_error(exc)

        async with ctx.loaders.db_lock:
            try:
                tokens = await UserService(ctx.session).login(payload)
            except _DOMAIN_ERRORS as exc:
                return MutationError.from_exception(exc)

        return LoginSuccess(
            tokens=AuthTokens(
                access_token=tokens.access_token,
                refresh_token=tokens.refresh_token,
                token_type=tokens.token_type,
            )
        )

    @strawberry.mutation(description="Create a project", permission_classes=[IsAuthenticated])
    async def create_project(
        self,
        info: Info[GraphQLContext, None],
        input: CreateProjectInput,
    ) -> ProjectPayload:
        """Create a project owned by the caller.

        Args:
            info: Strawberry info with context
            input: Project name and description

        Returns:
            ProjectSuccess with the created project, or MutationError
        """
        ctx = info.context
        try:
            payload = ProjectCreate(name=input.name, description=input.description)
        except ValidationError as exc:
            return _validation_error(exc)

        async with ctx.loaders.db_lock:
            try:
                project = await ProjectService(ctx.session).create_project(
                    payload, _current_user(info),
                )
                await ctx.session.commit()
            except _DOMAIN_ERRORS as exc:
                await ctx.session.rollback()
                return MutationError.from_exception(exc)

        ctx.loaders.projects.prime(project.id, project)
        ctx.loaders.tasks_by_project.prime(project.id, [])
        created = ProjectType.from_model(project)
        await get_event_broker().publish(Topic.PROJECT_CREATED, created)
        return ProjectSuccess(project=created)

    @strawberry.mutation(description="Update a project", permission_classes=[IsAuthenticated])
    async def update_project(
        self,
        info: Info[GraphQLContext, None],
        id: int,
        input: UpdateProjectInput,
    ) -> ProjectPayload:
        ctx = info.context
        try:
            payload = ProjectUpdate(**_set_fields(input))
        except ValidationError as exc:
            return _validation_error(exc)

        async with ctx.loaders.db_lock:
            try:
                project = await ProjectService(ctx.session).update_project(
                    id, payload, _current_user(info),
                )
                await ctx.session.commit()
            except _DOMAIN_ERRORS as exc:
                await ctx.session.rollback()
                return MutationError.from_exception(exc)

        ctx.loaders.projects.clear(id)
        ctx.loaders.projects.prime(id, project)
        return ProjectSuccess(project=ProjectType.from_model(project))

    @strawberry.mutation(
        description="Delete a project and its tasks", permission_classes=[IsAuthenticated]
    )
    async def delete_project(
        self,
        info: Info[GraphQLContext, None],
        id: int,
    ) -> DeleteProjectPayload:
        ctx = info.context
        async with ctx.loaders.db_lock:
            try:
                await ProjectService(ctx.session).delete_project(id, _current_user(info))
                await ctx.session.commit()
            except _DOMAIN_ERRORS as exc:
                await ctx.session.rollback()
                return MutationError.from_exception(exc)

        ctx.loaders.projects.clear(id)
        ctx.loaders.tasks_by_project.clear(id)
        logger.info("Deleted project via GraphQL", extra={"project_id": id})
        return DeleteSuccess(id=id)

    @strawberry.mutation(description="Create a task", permission_classes=[IsAuthenticated])
    async def create_task(
        self,
        info: Info[GraphQLContext, None],
        input: CreateTaskInput,
    ) -> TaskPayload:
        """Create a task in an existing project.

        Args:
            info: Strawberry info with context
            input: Task data; project_id must reference an existing project

        Returns:
            TaskSuccess with the created task, or MutationError
        """
        ctx = info.context
        try:
            payload = TaskCreate(
                title=input.title,
                description=input.description,
                project_id=input.project_id,
                assignee_id=input.assignee_id,
            )
        except ValidationError as exc:
            return _validation_error(exc)

        async with ctx.loaders.db_lock:
            try:
                task = await TaskService(ctx.session).create_task(payload, _current_user(info))
                await ctx.session.commit()
            except _DOMAIN_ERRORS as exc:
                await ctx.session.rollback()
                return MutationError.from_exception(exc)

        ctx.loaders.tasks_by_project.clear(task.project_id)
        created = TaskType.from_model(task)
        await get_event_broker().publish(Topic.TASK_CREATED, created)
        return TaskSuccess(task=created)

    @strawberry.mutation(description="Update a task", permission_classes=[IsAuthenticated])
    async def update_task(
        self,
        info: Info[GraphQLContext, None],
        id: int,
        input: UpdateTaskInput,
    ) -> TaskPayload:
        ctx = info.context
        try:
            payload = TaskUpdate(**_set_fields(input))
        except ValidationError as exc:
            return _validation_error(exc)

        async with ctx.loaders.db_lock:
            try:
                task = await TaskService(ctx.session).update_task(
                    id, payload, _current_user(info),
                )
                await ctx.session.commit()
            except _DOMAIN_ERRORS as exc:
                await ctx.session.rollback()
                return MutationError.from_exception(exc)

        ctx.loaders.tasks_by_project.clear(task.project_id)
        return TaskSuccess(task=TaskType.from_model(task))

    @strawberry.mutation(description="Delete a task", permission_classes=[IsAuthenticated])
    async def delete_task(
        self,
        info: Info[GraphQLContext, None],
        id: int,
    ) -> DeleteTaskPayload:
        ctx = info.context
        async with ctx.loaders.db_lock:
            try:
                task = await TaskService(ctx.session).delete_task(id, _current_user(info))
                await ctx.session.commit()
            except _DOMAIN_ERRORS as exc:
                await ctx.session.rollback()
                return MutationError.from_exception(exc)

        ctx.loaders.tasks_by_project.clear(task.project_id)
        return DeleteSuccess(id=id)


__all__ = ["Mutation"]
