"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from taskboard_service.core.settings import get_app_settings, get_graphql_settings
from taskboard_service.features.metrics.router import router as metrics_router
from taskboard_service.features.projects.router import router as projects_router
from taskboard_service.features.tasks.router import router as tasks_router
from taskboard_service.features.users.router import router as users_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from taskboard_service.core.settings import AppSettings, GraphQLSettings

logger = logging.getLogger(__name__)


def setup_routers(
    app: FastAPI,
    app_settings: AppSettings | None = None,
    graphql_settings: GraphQLSettings | None = None,
) -> None:
    """Register all feature routers with the application.

    Args:
        app: FastAPI application instance.
        app_settings: Optional application settings override for the API prefix.
        graphql_settings: Optional override controlling GraphQL availability.
    """
    app_settings = app_settings or get_app_settings()
    graphql_settings = graphql_settings or get_graphql_settings()

    api_prefix = app_settings.api_prefix

    # No prefix: scraped at /metrics
    app.include_router(metrics_router)

    app.include_router(users_router, prefix=api_prefix)
    app.include_router(projects_router, prefix=api_prefix)
    app.include_router(tasks_router, prefix=api_prefix)

    if graphql_settings.enabled:
        from taskboard_service.features.graphql.router import create_graphql_router

        app.include_router(
            create_graphql_router(graphql_settings),
            prefix=graphql_settings.path,
            tags=["graphql"],
        )
        logger.info("GraphQL endpoint enabled", extra={"path": graphql_settings.path})

    logger.debug("Routers registered", extra={"api_prefix": api_prefix})


__all__ = ["setup_routers"]
