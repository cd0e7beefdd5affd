"""Cached accessors for each settings domain.

Every accessor builds its model on first use (reading the environment and
``.env``) and hands out the same frozen instance afterwards. Tests that
change environment variables call ``clear_all_caches()`` to rebuild.
"""

from __future__ import annotations

from functools import lru_cache

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .graphql import GraphQLSettings
from .logs import LoggingSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    return AppSettings()


@lru_cache(maxsize=1)
def get_db_settings() -> DatabaseSettings:
    return DatabaseSettings()


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    """Auth settings; raises if both JWT secrets are equal."""
    return AuthSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    return LoggingSettings()


@lru_cache(maxsize=1)
def get_graphql_settings() -> GraphQLSettings:
    """GraphQL endpoint and request-loader tuning."""
    return GraphQLSettings()


_CACHED_LOADERS = (
    get_app_settings,
    get_db_settings,
    get_auth_settings,
    get_logging_settings,
    get_graphql_settings,
)


def clear_all_caches() -> None:
    """Drop every cached settings instance, including the unified one."""
    from .unified import get_settings

    for loader in (*_CACHED_LOADERS, get_settings):
        loader.cache_clear()
