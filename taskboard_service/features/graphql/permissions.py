"""Permission classes for field-level authorization in GraphQL.

Usage:
    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def create_project(self, info: Info, input: ProjectInput) -> ProjectPayload:
        ...
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from strawberry.permission import BasePermission

if TYPE_CHECKING:
    from strawberry.types import Info

    from taskboard_service.features.graphql.context import GraphQLContext

logger = logging.getLogger(__name__)


class IsAuthenticated(BasePermission):
    """Require a valid access token."""

    message = "You must be authenticated to access this resource"

    def has_permission(
        self, source: Any, info: Info[GraphQLContext, None], **kwargs: Any
    ) -> bool:
        is_authed = info.context.user is not None
        if not is_authed:
            logger.warning(
                "Unauthenticated access attempt",
                extra={"field": info.field_name},
            )
        return is_authed


class IsAdmin(BasePermission):
    """Require an authenticated user with the admin role."""

    message = "Admin role required"

    def has_permission(
        self, source: Any, info: Info[GraphQLContext, None], **kwargs: Any
    ) -> bool:
        user = info.context.user
        if user is None or not user.is_admin:
            logger.warning(
                "Admin access denied",
                extra={"field": info.field_name, "user_id": user.id if user else None},
            )
            return False
        return True


__all__ = ["IsAdmin", "IsAuthenticated"]
