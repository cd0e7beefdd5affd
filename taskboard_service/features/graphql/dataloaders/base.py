"""Shared plumbing for entity loaders.

Each entity loader wraps a ``BatchLoader`` whose fetch function queries the
request's ``AsyncSession``. An ``AsyncSession`` does not allow concurrent
operations, so every fetch in a request holds the same lock while it talks
to the database.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from taskboard_service.core.dataloader import BatchLoader, Result

if TYPE_CHECKING:
    from collections.abc import Hashable, Iterable

    from sqlalchemy.ext.asyncio import AsyncSession


class EntityDataLoader[K: Hashable, V](ABC):
    """Base for request-scoped loaders over one query shape.

    Subclasses implement ``_batch_load`` returning one ``Result`` per key.
    ``load`` collapses the result to ``V | None``; use ``load_result`` to
    inspect ``NotFound`` and ``Err`` explicitly.
    """

    name: str = "entity"

    def __init__(
        self,
        session: AsyncSession,
        *,
        lock: asyncio.Lock | None = None,
        max_batch_size: int | None = None,
        cache: bool = True,
    ) -> None:
        self._session = session
        self._lock = lock or asyncio.Lock()
        self.loader: BatchLoader[K, V] = BatchLoader(
            self._fetch,
            max_batch_size=max_batch_size,
            cache=cache,
            name=self.name,
        )

    async def _fetch(self, keys: list[K]) -> list[Result[V]]:
        async with self._lock:
            return await self._batch_load(keys)

    @abstractmethod
    async def _batch_load(self, keys: list[K]) -> list[Result[V]]:
        """Fetch one index-aligned ``Result`` per key."""

    async def load_result(self, key: K) -> Result[V]:
        return await self.loader.load(key)

    async def load(self, key: K) -> V | None:
        """Load one value, batched with every other load in this turn.

        Returns:
            The value, or None when the key does not exist

        Raises:
            DataLoaderError: If the batch containing the key failed
        """
        result = await self.loader.load(key)
        return result.value_or(None)

    async def load_many(self, keys: Iterable[K]) -> list[V | None]:
        results = await asyncio.gather(*self.loader.load_many(keys))
        return [result.value_or(None) for result in results]

    def clear(self, key: K) -> None:
        self.loader.clear(key)

    def prime(self, key: K, value: Any, *, force: bool = True) -> None:
        """Seed a value, replacing any memoized entry unless ``force`` is False."""
        self.loader.prime(key, value, force=force)


__all__ = ["EntityDataLoader"]
