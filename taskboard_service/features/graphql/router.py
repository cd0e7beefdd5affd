"""GraphQL router for FastAPI integration.

Provides:
- GraphQL endpoint (mounted at ``GRAPHQL_PATH`` by app/router.py)
- WebSocket transport for subscriptions
- Optional in-browser IDE (GraphiQL, Apollo Sandbox or Pathfinder)
- Request context with auth, session and a fresh set of DataLoaders
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated, Any, cast

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: TC002
from strawberry.fastapi import GraphQLRouter

from taskboard_service.core.dependencies.auth import get_current_user_optional
from taskboard_service.core.dependencies.database import get_db_session
from taskboard_service.core.security import AuthUser  # noqa: TC001
from taskboard_service.core.settings import get_graphql_settings
from taskboard_service.features.graphql.context import GraphQLContext
from taskboard_service.features.graphql.dataloaders import create_dataloaders
from taskboard_service.features.graphql.schema import schema

if TYPE_CHECKING:
    from taskboard_service.core.settings import GraphQLSettings

logger = logging.getLogger(__name__)


async def get_graphql_context(
    request: Request,
    response: Response,
    background_tasks: BackgroundTasks,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    user: Annotated[AuthUser | None, Depends(get_current_user_optional)],
) -> GraphQLContext:
    """Create GraphQL context from FastAPI dependencies.

    Args:
        request: FastAPI request
        response: FastAPI response (for setting headers/cookies)
        background_tasks: FastAPI background tasks
        session: Database session from dependency
        user: Authenticated user (or None)

    Returns:
        GraphQLContext for use in resolvers
    """
    return GraphQLContext(
        request=request,
        response=response,
        background_tasks=background_tasks,
        session=session,
        loaders=create_dataloaders(session),
        user=user,
        request_id=getattr(request.state, "request_id", None),
    )


def create_graphql_router(settings: GraphQLSettings | None = None) -> APIRouter:
    """Create GraphQL router with settings-based configuration."""
    settings = settings or get_graphql_settings()

    subscription_protocols: tuple[str, ...] = ()
    if settings.subscriptions_enabled:
        subscription_protocols = ("graphql-transport-ws", "graphql-ws")

    graphql_app = GraphQLRouter(
        schema,
        context_getter=cast("Any", get_graphql_context),
        subscription_protocols=subscription_protocols,
        graphql_ide=settings.graphql_ide or None,
        path="/",  # mounted prefix adds the actual path
    )

    router = APIRouter()
    router.include_router(graphql_app, prefix="")
    logger.debug(
        "GraphQL router created",
        extra={
            "graphql_ide": settings.graphql_ide,
            "subscriptions_enabled": settings.subscriptions_enabled,
        },
    )
    return router


__all__ = ["create_graphql_router", "get_graphql_context"]
