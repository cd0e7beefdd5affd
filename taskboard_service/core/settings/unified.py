"""Unified settings composition for convenient access.

Composes all domain settings into a single object. Each nested settings
class still reads its own env prefix.

Usage:
    from taskboard_service.core.settings import get_settings

    settings = get_settings()
    print(settings.app.api_prefix)
    print(settings.graphql.dataloader_max_batch_size)
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

from .loader import (
    get_app_settings,
    get_auth_settings,
    get_db_settings,
    get_graphql_settings,
    get_logging_settings,
)
from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .graphql import GraphQLSettings
from .logs import LoggingSettings


class Settings(BaseModel):
    """All settings domains in one frozen object."""

    app: AppSettings = Field(default_factory=get_app_settings)
    db: DatabaseSettings = Field(default_factory=get_db_settings)
    auth: AuthSettings = Field(default_factory=get_auth_settings)
    logging: LoggingSettings = Field(default_factory=get_logging_settings)
    graphql: GraphQLSettings = Field(default_factory=get_graphql_settings)

    model_config = ConfigDict(frozen=True)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached unified settings.

    Returns:
        Settings built from the individually cached domain loaders.
    """
    return Settings()
