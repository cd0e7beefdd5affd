"""GraphQL server configuration settings.

Controls the GraphQL endpoint, its IDE, and the per-request loaders.
Environment variables use GRAPHQL_ prefix.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

from ._config import env_config

GraphQLIDE = Literal["graphiql", "apollo-sandbox", "pathfinder", False]


class GraphQLSettings(BaseSettings):
    """GraphQL server configuration.

    Environment variables use GRAPHQL_ prefix.
    Example: GRAPHQL_ENABLED=true, GRAPHQL_DATALOADER_MAX_BATCH_SIZE=100
    """

    enabled: bool = Field(default=True, description="Enable GraphQL endpoint")
    path: str = Field(
        default="/graphql",
        min_length=1,
        max_length=255,
        pattern=r"^/.*$",
        description="GraphQL endpoint path",
    )
    graphql_ide: GraphQLIDE = Field(
        default="graphiql",
        description="GraphQL IDE to serve on GET, or false to disable",
    )

    # Subscriptions
    subscriptions_enabled: bool = Field(
        default=True,
        description="Accept GraphQL subscriptions over WebSocket",
    )
    subscription_queue_size: int = Field(
        default=100,
        ge=1,
        le=10_000,
        description="Events buffered per subscriber before new ones are dropped",
    )

    # Loader tuning
    dataloader_max_batch_size: int | None = Field(
        default=100,
        ge=1,
        description="Maximum keys per loader fetch; None means unbounded",
    )
    dataloader_cache: bool = Field(
        default=True,
        description="Memoize loader results for the lifetime of a request",
    )

    model_config = env_config("GRAPHQL_")
