"""Subscription resolvers for real-time GraphQL updates.

Provides WebSocket subscriptions for:
- newProject: every project created after the subscription starts
- newTask: every task created after the subscription starts

Nested fields (owner, tasks, project, assignee) resolve through the
subscriber's own request loaders.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import aclosing

import strawberry
from strawberry.types import Info

from taskboard_service.features.graphql.context import GraphQLContext
from taskboard_service.features.graphql.events import Topic, get_event_broker
from taskboard_service.features.graphql.types.projects import ProjectType
from taskboard_service.features.graphql.types.tasks import TaskType


@strawberry.type(description="Root subscription type")
class Subscription:
    """GraphQL Subscription resolvers."""

    @strawberry.subscription(description="Projects as they are created")
    async def new_project(
        self,
        info: Info[GraphQLContext, None],  # noqa: ARG002 - required by Strawberry
    ) -> AsyncGenerator[ProjectType]:
        async with aclosing(get_event_broker().subscribe(Topic.PROJECT_CREATED)) as events:
            async for project in events:
                yield project

    @strawberry.subscription(description="Tasks as they are created")
    async def new_task(
        self,
        info: Info[GraphQLContext, None],  # noqa: ARG002 - required by Strawberry
    ) -> AsyncGenerator[TaskType]:
        async with aclosing(get_event_broker().subscribe(Topic.TASK_CREATED)) as events:
            async for task in events:
                yield task


__all__ = ["Subscription"]
