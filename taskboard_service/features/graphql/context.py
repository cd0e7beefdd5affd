"""GraphQL context for request-scoped dependencies.

The context is created fresh for each GraphQL request and provides:
- Database session (for queries/mutations)
- DataLoaders (for N+1 prevention), discarded with the request
- Authenticated user (optional)
- Request ID (for log correlation)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from strawberry.fastapi import BaseContext

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from starlette.background import BackgroundTasks
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.websockets import WebSocket

    from taskboard_service.core.security import AuthUser
    from taskboard_service.features.graphql.dataloaders import DataLoaders


@dataclass
class GraphQLContext(BaseContext):
    """Request context for GraphQL operations.

    Example usage in resolver:
        @strawberry.field
        async def owner(self, info: Info[GraphQLContext, None]) -> UserType | None:
            user = await info.context.loaders.users.load(self.owner_id)
            return UserType.from_model(user) if user else None
    """

    request: Request | WebSocket | None = None
    response: Response | None = None
    background_tasks: BackgroundTasks | None = None

    session: AsyncSession = field(default=None)  # type: ignore[assignment]
    loaders: DataLoaders = field(default=None)  # type: ignore[assignment]
    user: AuthUser | None = None
    request_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


__all__ = ["GraphQLContext"]
