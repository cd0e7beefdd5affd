"""DataLoader for batch-loading users by ID."""

from __future__ import annotations

from taskboard_service.core.dataloader import Result, to_result
from taskboard_service.features.graphql.dataloaders.base import EntityDataLoader
from taskboard_service.features.users.models import User
from taskboard_service.features.users.repository import get_user_repository


class UserDataLoader(EntityDataLoader[int, User]):
    """Batch-loads users by ID.

    Usage:
        loader = UserDataLoader(session)
        owner = await loader.load(project.owner_id)  # batched with sibling loads
    """

    name = "users"

    async def _batch_load(self, ids: list[int]) -> list[Result[User]]:
        users = await get_user_repository().get_many_by_ids(self._session, ids)
        return [to_result(id_, user) for id_, user in zip(ids, users, strict=True)]


__all__ = ["UserDataLoader"]
