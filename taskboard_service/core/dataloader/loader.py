"""Request-scoped batching loader.

Coalesces individual key lookups issued during one event-loop turn into a
single call to a batch fetch function, and memoizes the results for the
lifetime of the loader instance.

Lifecycle:
    One loader per logical unit of work (typically one HTTP/GraphQL request).
    The memo table lives and dies with the instance; nothing is shared across
    instances and nothing is evicted while the instance is alive.

Batching window:
    The first ``load()`` of a window schedules a flush with ``loop.call_soon``.
    When that callback runs it starts the flush task, and the window closes
    when the task first executes. Every ``load()`` issued before that point,
    by any coroutine on the loop, joins the same batch. A window that opens
    while a previous flush is still in flight stays open until that flush
    has settled, so cycle N always completes before cycle N+1 is dispatched.

Example:
    async def fetch_users(ids: list[int]) -> list[Result[User]]:
        rows = await repo.get_many_by_ids(session, ids)
        return [Ok(row) if row else NotFound(id_) for id_, row in zip(ids, rows)]

    loader = BatchLoader(fetch_users, max_batch_size=100)
    first, second = loader.load(1), loader.load(2)   # not fetched yet
    alice = (await first).unwrap()                   # one fetch for [1, 2]
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Hashable, Iterable, Mapping, Sequence
from typing import Any

from taskboard_service.core.dataloader.exceptions import (
    BatchContractError,
    BatchFetchError,
    InvalidKeyError,
)
from taskboard_service.core.dataloader.result import Err, Result, to_result
from taskboard_service.infra.logging import get_lazy_logger
from taskboard_service.infra.metrics import tracking

type BatchFetch[K] = Callable[[list[K]], Awaitable[Sequence[Any]] | Sequence[Any]]


class BatchLoader[K: Hashable, V]:
    """Deduplicating, batching, memoizing key loader.

    Args:
        fetch: Batch function ``fetch(keys) -> results``. Receives unique keys
            in first-requested order and must return exactly one item per key,
            index-aligned. Items may be ``Result`` instances, exceptions
            (become ``Err``), ``None`` (becomes ``NotFound``) or plain values
            (become ``Ok``). May be sync or async.
        max_batch_size: Split a window into chunks of at most this many keys,
            one fetch call per chunk.
        cache: Memoize results for the lifetime of the instance.
        name: Name used in logs and metrics (defaults to the fetch qualname).

    Example:
        loader = BatchLoader(fetch_users)
        handles = loader.load_many([1, 2, 1])
        results = await asyncio.gather(*handles)
        assert results[0] is results[2]
    """

    __slots__ = (
        "_fetch",
        "_flush_task",
        "_lazy",
        "_logger",
        "_memo",
        "_window",
        "cache",
        "max_batch_size",
        "name",
    )

    def __init__(
        self,
        fetch: BatchFetch[K],
        *,
        max_batch_size: int | None = None,
        cache: bool = True,
        name: str | None = None,
    ) -> None:
        if max_batch_size is not None and max_batch_size < 1:
            msg = f"max_batch_size must be a positive integer, got {max_batch_size}"
            raise ValueError(msg)

        self._fetch = fetch
        self.max_batch_size = max_batch_size
        self.cache = cache
        self.name = name or getattr(fetch, "__qualname__", type(self).__name__)

        self._memo: dict[K, asyncio.Future[Result[V]]] = {}
        self._window: dict[K, asyncio.Future[Result[V]]] | None = None
        self._flush_task: asyncio.Task[None] | None = None

        self._logger = logging.getLogger(f"dataloader.{self.name}")
        self._lazy = get_lazy_logger(f"dataloader.{self.name}")

    def __repr__(self) -> str:
        return (
            f"<BatchLoader(name={self.name!r}, cache={self.cache}, "
            f"max_batch_size={self.max_batch_size}, memo={len(self._memo)})>"
        )

    # ──────────────────────────────────────────────────────────────
    # Public API
    # ──────────────────────────────────────────────────────────────

    def load(self, key: K) -> asyncio.Future[Result[V]]:
        """Request the value for a key.

        Returns immediately with a handle that settles once the batch
        containing the key has been fetched. Must be called from a running
        event loop.

        Every call gets its own handle over the key's shared slot, so
        cancelling one caller's await leaves the other callers and the memo
        table untouched. Handles for the same key settle to the identical
        ``Result``.

        Args:
            key: Hashable, non-None key

        Returns:
            Future resolving to the key's ``Result``

        Raises:
            InvalidKeyError: If the key is None or unhashable
        """
        self._check_key(key)

        if self.cache:
            memoized = self._memo.get(key)
            if memoized is not None:
                return self._handle(memoized)

        window = self._open_window()
        slot = window.get(key)
        if slot is None:
            slot = asyncio.get_running_loop().create_future()
            window[key] = slot
        # A cleared key that rejoins the open window is memoized again
        if self.cache:
            self._memo[key] = slot
        return self._handle(slot)

    def load_many(self, keys: Iterable[K]) -> list[asyncio.Future[Result[V]]]:
        """Request values for several keys.

        Equal keys share one slot and settle to the same ``Result``. All keys
        are validated before any is enqueued.

        Args:
            keys: Keys in the order results should be returned

        Returns:
            One handle per input key, in input order
        """
        keys = list(keys)
        for key in keys:
            self._check_key(key)
        return [self.load(key) for key in keys]

    def clear(self, key: K) -> BatchLoader[K, V]:
        """Forget the memoized result for a key.

        Handles already returned for the key still settle from the fetch
        they were dispatched with.
        """
        self._check_key(key)
        self._memo.pop(key, None)
        return self

    def clear_all(self) -> BatchLoader[K, V]:
        """Forget every memoized result."""
        self._memo.clear()
        return self

    def prime(self, key: K, value: Any, *, force: bool = False) -> BatchLoader[K, V]:
        """Seed the memo table with a known value.

        Skipped when the key already has an entry unless ``force`` is set.
        Has no effect when caching is disabled. ``value`` is coerced like a
        fetch item (exceptions prime a failure, ``None`` primes NotFound).

        Args:
            key: Key to seed
            value: Value, exception, or ``Result`` for the key
            force: Replace an existing entry
        """
        self._check_key(key)
        if not self.cache:
            return self
        if key in self._memo and not force:
            return self

        slot: asyncio.Future[Result[V]] = asyncio.get_running_loop().create_future()
        slot.set_result(to_result(key, value))
        self._memo[key] = slot
        return self

    async def flush(self) -> None:
        """Dispatch the current window now and wait until it has settled.

        Explicit alternative to waiting for the scheduled flush, for hosts
        that want to close a batch at a boundary of their own.
        """
        window = self._window
        if window is None:
            if self._flush_task is not None and not self._flush_task.done():
                await asyncio.wait((self._flush_task,))
            return

        task = self._start_flush(window)
        await asyncio.wait((task,))

    # ──────────────────────────────────────────────────────────────
    # Scheduling
    # ──────────────────────────────────────────────────────────────

    def _check_key(self, key: Any) -> None:
        if key is None:
            raise InvalidKeyError(key, "key must not be None")
        try:
            hash(key)
        except TypeError as exc:
            raise InvalidKeyError(key, f"unhashable type {type(key).__name__!r}") from exc

    @staticmethod
    def _handle(slot: asyncio.Future[Result[V]]) -> asyncio.Future[Result[V]]:
        handle: asyncio.Future[Result[V]] = slot.get_loop().create_future()
        if slot.done():
            _copy_outcome(slot, handle)
        else:
            slot.add_done_callback(lambda done: _copy_outcome(done, handle))
        return handle

    def _open_window(self) -> dict[K, asyncio.Future[Result[V]]]:
        if self._window is None:
            self._window = {}
            asyncio.get_running_loop().call_soon(self._on_quiescent, self._window)
        return self._window

    def _on_quiescent(self, window: dict[K, asyncio.Future[Result[V]]]) -> None:
        # flush() may already have taken this window
        if self._window is window:
            self._start_flush(window)

    def _start_flush(self, window: dict[K, asyncio.Future[Result[V]]]) -> asyncio.Task[None]:
        previous = self._flush_task
        task = asyncio.get_running_loop().create_task(self._flush(window, previous))
        self._flush_task = task
        return task

    async def _flush(
        self,
        window: dict[K, asyncio.Future[Result[V]]],
        previous: asyncio.Task[None] | None,
    ) -> None:
        if previous is not None and not previous.done():
            await asyncio.wait((previous,))

        if self._window is not window:
            return
        self._window = None

        try:
            await self._dispatch(window)
        except asyncio.CancelledError:
            for key, slot in window.items():
                if slot.cancel() and self._memo.get(key) is slot:
                    del self._memo[key]
            raise

    # ──────────────────────────────────────────────────────────────
    # Dispatch
    # ──────────────────────────────────────────────────────────────

    def _chunk(self, keys: list[K]) -> list[list[K]]:
        if self.max_batch_size is None or len(keys) <= self.max_batch_size:
            return [keys]
        size = self.max_batch_size
        return [keys[i : i + size] for i in range(0, len(keys), size)]

    async def _dispatch(self, window: dict[K, asyncio.Future[Result[V]]]) -> None:
        keys = list(window)
        if not keys:
            return

        chunks = self._chunk(keys)
        self._lazy.debug(
            lambda: f"dataloader.dispatch: {self.name} keys={len(keys)} chunks={len(chunks)}"
        )
        await asyncio.gather(*(self._dispatch_chunk(chunk, window) for chunk in chunks))

    async def _dispatch_chunk(
        self,
        keys: list[K],
        window: dict[K, asyncio.Future[Result[V]]],
    ) -> None:
        tracking.track_dataloader_batch(self.name, len(keys))

        try:
            outcome = self._fetch(list(keys))
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except Exception as exc:
            self._logger.warning(
                "Batch fetch failed",
                extra={
                    "loader": self.name,
                    "keys": len(keys),
                    "exception_type": type(exc).__name__,
                    "operation": "dataloader.fetch",
                },
            )
            tracking.track_dataloader_failure(self.name, "fetch")
            self._settle_all(keys, window, Err(BatchFetchError(exc, keys, loader=self.name)))
            return

        if not isinstance(outcome, Sequence) or isinstance(outcome, (str, bytes, Mapping)):
            self._contract_violation(keys, window, received=None)
            return
        if len(outcome) != len(keys):
            self._contract_violation(keys, window, received=len(outcome))
            return

        for key, item in zip(keys, outcome, strict=True):
            self._settle(window[key], to_result(key, item))

        self._lazy.debug(lambda: f"dataloader.settled: {self.name} keys={len(keys)}")

    def _contract_violation(
        self,
        keys: list[K],
        window: dict[K, asyncio.Future[Result[V]]],
        *,
        received: int | None,
    ) -> None:
        error = BatchContractError(len(keys), received, loader=self.name)
        self._logger.error(
            "Batch fetch violated result contract",
            extra={
                "loader": self.name,
                "expected": len(keys),
                "received": received,
                "operation": "dataloader.fetch",
            },
        )
        tracking.track_dataloader_failure(self.name, "contract")
        self._settle_all(keys, window, Err(error))

    def _settle_all(
        self,
        keys: list[K],
        window: dict[K, asyncio.Future[Result[V]]],
        result: Result[V],
    ) -> None:
        for key in keys:
            self._settle(window[key], result)

    @staticmethod
    def _settle(slot: asyncio.Future[Result[V]], result: Result[V]) -> None:
        if not slot.done():
            slot.set_result(result)


def _copy_outcome(slot: asyncio.Future[Any], handle: asyncio.Future[Any]) -> None:
    # The caller may have cancelled its handle already
    if handle.done():
        return
    if slot.cancelled():
        handle.cancel()
    else:
        handle.set_result(slot.result())


__all__ = ["BatchFetch", "BatchLoader"]
