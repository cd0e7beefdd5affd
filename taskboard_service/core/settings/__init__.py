"""Modular Pydantic Settings v2 configuration.

One frozen settings model per domain (app/db/auth/logging/graphql), each
read from its own env prefix and an optional ``.env`` file, and exposed
through an LRU-cached loader.

Import settings via cached loaders:
    from taskboard_service.core.settings import get_app_settings

Or use unified settings for convenient access to all domains:
    from taskboard_service.core.settings import get_settings

    settings = get_settings()
    print(settings.db.database_url)
"""

from __future__ import annotations

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .graphql import GraphQLSettings
from .loader import (
    clear_all_caches,
    get_app_settings,
    get_auth_settings,
    get_db_settings,
    get_graphql_settings,
    get_logging_settings,
)
from .logs import LoggingSettings
from .unified import Settings, get_settings

__all__ = [
    "AppSettings",
    "AuthSettings",
    "DatabaseSettings",
    "GraphQLSettings",
    "LoggingSettings",
    "Settings",
    "clear_all_caches",
    "get_app_settings",
    "get_auth_settings",
    "get_db_settings",
    "get_graphql_settings",
    "get_logging_settings",
    "get_settings",
]
