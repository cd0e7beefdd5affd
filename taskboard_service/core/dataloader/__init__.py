"""Request-scoped batching loader.

Example:
    from taskboard_service.core.dataloader import BatchLoader, results_from_mapping

    async def fetch_users(ids: list[int]) -> list[Result[User]]:
        rows = await session.execute(select(User).where(User.id.in_(ids)))
        return results_from_mapping(ids, {u.id: u for u in rows.scalars()})

    users = BatchLoader(fetch_users, max_batch_size=100, name="users")
    alice, bob = await asyncio.gather(users.load(1), users.load(2))
"""

from taskboard_service.core.dataloader.exceptions import (
    BatchContractError,
    BatchFetchError,
    DataLoaderError,
    InvalidKeyError,
    KeyNotFoundError,
)
from taskboard_service.core.dataloader.loader import BatchFetch, BatchLoader
from taskboard_service.core.dataloader.result import (
    Err,
    NotFound,
    Ok,
    Result,
    results_from_mapping,
    to_result,
)

__all__ = [
    "BatchContractError",
    "BatchFetch",
    "BatchFetchError",
    "BatchLoader",
    "DataLoaderError",
    "Err",
    "InvalidKeyError",
    "KeyNotFoundError",
    "NotFound",
    "Ok",
    "Result",
    "results_from_mapping",
    "to_result",
]
