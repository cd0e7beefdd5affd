"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from taskboard_service.app.exception_handlers import configure_exception_handlers
from taskboard_service.app.lifespan import lifespan
from taskboard_service.app.middleware import configure_middleware
from taskboard_service.app.router import setup_routers
from taskboard_service.core.settings import get_settings


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Settings are loaded once and cached via LRU cache.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()
    app_settings = settings.app

    app = FastAPI(
        title=app_settings.title,
        version=app_settings.version,
        docs_url=None if app_settings.disable_docs else app_settings.docs_url,
        redoc_url=None,
        openapi_url=None if app_settings.disable_docs else "/openapi.json",
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    configure_exception_handlers(app)
    configure_middleware(app)
    setup_routers(app, app_settings, settings.graphql)

    return app


# Application instance for uvicorn
app = create_app()
