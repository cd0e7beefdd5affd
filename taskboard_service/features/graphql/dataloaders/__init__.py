"""DataLoader container and factory.

DataLoaders batch and cache database lookups within a single request,
preventing N+1 query problems in GraphQL field resolvers.

Each GraphQL request gets its own container, so batching boundaries and
memoized results never leak across requests.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from taskboard_service.core.settings import get_graphql_settings
from taskboard_service.features.graphql.dataloaders.base import EntityDataLoader
from taskboard_service.features.graphql.dataloaders.projects import ProjectDataLoader
from taskboard_service.features.graphql.dataloaders.tasks import TasksByProjectDataLoader
from taskboard_service.features.graphql.dataloaders.users import UserDataLoader

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from taskboard_service.core.settings import GraphQLSettings


@dataclass
class DataLoaders:
    """Container for all DataLoader instances.

    One instance created per GraphQL request.

    Usage in resolver:
        ctx = info.context
        owner = await ctx.loaders.users.load(project.owner_id)
    """

    users: UserDataLoader
    projects: ProjectDataLoader
    tasks_by_project: TasksByProjectDataLoader
    db_lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def clear_all(self) -> None:
        for loader in (self.users, self.projects, self.tasks_by_project):
            loader.loader.clear_all()


def create_dataloaders(
    session: AsyncSession,
    settings: GraphQLSettings | None = None,
) -> DataLoaders:
    """Factory for creating request-scoped DataLoaders.

    Args:
        session: Database session for the current request
        settings: GraphQL settings (batch size and caching)

    Returns:
        DataLoaders container with all loaders initialized
    """
    settings = settings or get_graphql_settings()
    lock = asyncio.Lock()
    options = {
        "lock": lock,
        "max_batch_size": settings.dataloader_max_batch_size,
        "cache": settings.dataloader_cache,
    }
    return DataLoaders(
        users=UserDataLoader(session, **options),
        projects=ProjectDataLoader(session, **options),
        tasks_by_project=TasksByProjectDataLoader(session, **options),
        db_lock=lock,
    )


__all__ = [
    "DataLoaders",
    "EntityDataLoader",
    "ProjectDataLoader",
    "TasksByProjectDataLoader",
    "UserDataLoader",
    "create_dataloaders",
]
