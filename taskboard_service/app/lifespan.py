"""Application lifespan management.

Startup order: logging, then the database (connectivity check and optional
table creation). Shutdown disposes the engine.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from taskboard_service.core.settings import get_app_settings, get_logging_settings
from taskboard_service.infra.database import close_database, init_database
from taskboard_service.infra.logging import setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start and stop application services.

    Args:
        app: FastAPI application instance.
    """
    setup_logging(get_logging_settings())
    app_settings = get_app_settings()
    logger.info(
        "Starting application",
        extra={
            "service": app_settings.service_name,
            "version": app_settings.version,
            "environment": app_settings.environment,
        },
    )

    await init_database()

    try:
        yield
    finally:
        await close_database()
        logger.info("Application shutdown complete")


__all__ = ["lifespan"]
