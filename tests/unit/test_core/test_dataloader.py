"""Tests for the request-scoped BatchLoader."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from taskboard_service.core.dataloader import (
    BatchContractError,
    BatchFetchError,
    BatchLoader,
    Err,
    InvalidKeyError,
    NotFound,
    Ok,
)
from taskboard_service.infra.metrics.prometheus import REGISTRY


class RecordingFetch:
    """Batch fetch stub that records every call it receives."""

    def __init__(self, data: dict[Any, Any] | None = None) -> None:
        self.data = data if data is not None else {}
        self.calls: list[list[Any]] = []

    async def __call__(self, keys: list[Any]) -> list[Any]:
        self.calls.append(list(keys))
        return [self.data.get(key) for key in keys]


async def _until(predicate, attempts: int = 50) -> None:
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


class TestBatching:
    """Keys requested in one turn are coalesced into one fetch."""

    @pytest.mark.asyncio
    async def test_same_turn_loads_share_one_fetch(self) -> None:
        fetch = RecordingFetch({1: "a", 2: "b", 3: "c"})
        loader = BatchLoader(fetch)

        handles = [loader.load(3), loader.load(1), loader.load(2)]
        results = await asyncio.gather(*handles)

        assert fetch.calls == [[3, 1, 2]]
        assert [r.unwrap() for r in results] == ["c", "a", "b"]

    @pytest.mark.asyncio
    async def test_load_does_not_fetch_synchronously(self) -> None:
        fetch = RecordingFetch({1: "a"})
        loader = BatchLoader(fetch)

        handle = loader.load(1)

        assert fetch.calls == []
        assert not handle.done()
        await handle
        assert fetch.calls == [[1]]

    @pytest.mark.asyncio
    async def test_duplicate_keys_are_deduplicated_in_first_seen_order(self) -> None:
        fetch = RecordingFetch({1: "a", 2: "b"})
        loader = BatchLoader(fetch)

        first = loader.load(2)
        second = loader.load(1)
        third = loader.load(2)
        await asyncio.gather(first, second, third)

        assert fetch.calls == [[2, 1]]
        assert first is not third
        assert (await first) is (await third)

    @pytest.mark.asyncio
    async def test_loads_from_concurrent_coroutines_join_one_batch(self) -> None:
        fetch = RecordingFetch({n: n * 10 for n in range(5)})
        loader = BatchLoader(fetch)

        async def resolve(key: int) -> int:
            return (await loader.load(key)).unwrap()

        values = await asyncio.gather(*(resolve(n) for n in range(5)))

        assert values == [0, 10, 20, 30, 40]
        assert fetch.calls == [[0, 1, 2, 3, 4]]

    @pytest.mark.asyncio
    async def test_alice_bob_and_missing_key(self) -> None:
        fetch = RecordingFetch({1: "Alice", 2: "Bob"})
        loader = BatchLoader(fetch)

        handles = [loader.load(1), loader.load(2), loader.load(3), loader.load(1)]
        results = await asyncio.gather(*handles)

        assert len(handles) == 4
        assert fetch.calls == [[1, 2, 3]]
        assert results[0] == Ok("Alice")
        assert results[3] == Ok("Alice")
        assert results[1] == Ok("Bob")
        assert results[2] == NotFound(3)

    @pytest.mark.asyncio
    async def test_sync_fetch_function_is_supported(self) -> None:
        calls: list[list[str]] = []

        def fetch(keys: list[str]) -> list[str]:
            calls.append(keys)
            return [key.upper() for key in keys]

        loader = BatchLoader(fetch)
        results = await asyncio.gather(*loader.load_many(["x", "y"]))

        assert [r.unwrap() for r in results] == ["X", "Y"]
        assert calls == [["x", "y"]]

    @pytest.mark.asyncio
    async def test_records_batch_metrics(self) -> None:
        loader = BatchLoader(RecordingFetch({1: "a", 2: "b"}), name="metrics_check")
        before = REGISTRY.get_sample_value(
            "dataloader_batches_total", {"loader": "metrics_check"}
        ) or 0.0

        await asyncio.gather(loader.load(1), loader.load(2))

        after = REGISTRY.get_sample_value("dataloader_batches_total", {"loader": "metrics_check"})
        assert after == before + 1


class TestLoadMany:
    """load_many returns one handle per input key."""

    @pytest.mark.asyncio
    async def test_duplicates_settle_to_the_same_result(self) -> None:
        fetch = RecordingFetch({"a": 1, "b": 2})
        loader = BatchLoader(fetch)

        handles = loader.load_many(["a", "b", "a"])
        results = await asyncio.gather(*handles)

        assert len(handles) == 3
        assert results[0] is results[2]
        assert results[0] == results[2] == Ok(1)
        assert results[1] == Ok(2)
        assert fetch.calls == [["a", "b"]]

    @pytest.mark.asyncio
    async def test_invalid_key_rejects_whole_call(self) -> None:
        fetch = RecordingFetch({1: "a"})
        loader = BatchLoader(fetch)

        with pytest.raises(InvalidKeyError):
            loader.load_many([1, None])

        for _ in range(5):
            await asyncio.sleep(0)
        assert fetch.calls == []


class TestContract:
    """Misaligned fetch results fail every slot of the chunk."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("returned", [["only-one"], ["a", "b", "extra"]])
    async def test_length_mismatch_fails_every_slot(self, returned: list[str]) -> None:
        async def fetch(keys: list[int]) -> list[str]:
            return returned

        loader = BatchLoader(fetch)
        handles = loader.load_many([1, 2])
        results = await asyncio.gather(*handles)

        assert all(handle.done() for handle in handles)
        for result in results:
            assert isinstance(result, Err)
            assert isinstance(result.error, BatchContractError)
            assert result.error.expected == 2
            assert result.error.received == len(returned)

    @pytest.mark.asyncio
    async def test_non_sequence_result_is_a_contract_error(self) -> None:
        async def fetch(keys: list[int]) -> dict[int, str]:
            return {key: "x" for key in keys}

        loader = BatchLoader(fetch)
        result = await loader.load(1)

        assert isinstance(result, Err)
        assert isinstance(result.error, BatchContractError)
        assert result.error.received is None

    @pytest.mark.asyncio
    async def test_unwrap_raises_contract_error(self) -> None:
        loader = BatchLoader(lambda keys: [])
        result = await loader.load("k")

        with pytest.raises(BatchContractError):
            result.unwrap()


class TestFailures:
    """Fetch failures and per-key failures."""

    @pytest.mark.asyncio
    async def test_fetch_exception_becomes_batch_fetch_error(self) -> None:
        boom = ConnectionError("database unavailable")

        async def fetch(keys: list[int]) -> list[str]:
            raise boom

        loader = BatchLoader(fetch, name="failing")
        results = await asyncio.gather(*loader.load_many([1, 2]))

        for result in results:
            assert isinstance(result, Err)
            assert isinstance(result.error, BatchFetchError)
            assert result.error.cause is boom
            assert result.error.__cause__ is boom
            assert result.error.keys == [1, 2]

    @pytest.mark.asyncio
    async def test_per_key_failure_leaves_siblings_untouched(self) -> None:
        async def fetch(keys: list[int]) -> list[Any]:
            return [ValueError("bad row") if key == 2 else f"row-{key}" for key in keys]

        loader = BatchLoader(fetch)
        first, second, third = await asyncio.gather(*loader.load_many([1, 2, 3]))

        assert first == Ok("row-1")
        assert third == Ok("row-3")
        assert isinstance(second, Err)
        assert isinstance(second.error, ValueError)

    @pytest.mark.asyncio
    async def test_failed_slot_is_not_refetched(self) -> None:
        calls: list[list[int]] = []

        async def fetch(keys: list[int]) -> list[str]:
            calls.append(keys)
            raise RuntimeError("transient")

        loader = BatchLoader(fetch)
        first = await loader.load(1)
        second = await loader.load(1)

        assert first is second
        assert calls == [[1]]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("key", [None, [1, 2], {"a": 1}])
    async def test_invalid_keys_are_rejected(self, key: Any) -> None:
        loader = BatchLoader(RecordingFetch())

        with pytest.raises(InvalidKeyError) as exc_info:
            loader.load(key)

        assert isinstance(exc_info.value, TypeError)

    def test_max_batch_size_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="max_batch_size"):
            BatchLoader(RecordingFetch(), max_batch_size=0)


class TestChunking:
    """max_batch_size splits one window into several fetch calls."""

    @pytest.mark.asyncio
    async def test_five_keys_with_batch_size_two(self) -> None:
        fetch = RecordingFetch({n: n for n in range(1, 6)})
        loader = BatchLoader(fetch, max_batch_size=2)

        results = await asyncio.gather(*loader.load_many([1, 2, 3, 4, 5]))

        assert sorted(fetch.calls) == [[1, 2], [3, 4], [5]]
        assert [r.unwrap() for r in results] == [1, 2, 3, 4, 5]

    @pytest.mark.asyncio
    async def test_contract_error_is_confined_to_its_chunk(self) -> None:
        async def fetch(keys: list[int]) -> list[int]:
            if 3 in keys:
                return [3]
            return list(keys)

        loader = BatchLoader(fetch, max_batch_size=2)
        results = await asyncio.gather(*loader.load_many([1, 2, 3, 4, 5]))

        assert results[0] == Ok(1)
        assert results[1] == Ok(2)
        assert results[4] == Ok(5)
        for result in results[2:4]:
            assert isinstance(result, Err)
            assert isinstance(result.error, BatchContractError)


class TestCache:
    """Memoization, clear and prime."""

    @pytest.mark.asyncio
    async def test_memoized_key_is_not_refetched(self) -> None:
        fetch = RecordingFetch({1: "a"})
        loader = BatchLoader(fetch)

        first = await loader.load(1)
        second = await loader.load(1)

        assert first is second
        assert fetch.calls == [[1]]

    @pytest.mark.asyncio
    async def test_clear_forces_refetch(self) -> None:
        fetch = RecordingFetch({1: "old"})
        loader = BatchLoader(fetch)
        assert (await loader.load(1)) == Ok("old")

        fetch.data[1] = "new"
        loader.clear(1)

        assert (await loader.load(1)) == Ok("new")
        assert fetch.calls == [[1], [1]]

    @pytest.mark.asyncio
    async def test_clear_all_forgets_everything(self) -> None:
        fetch = RecordingFetch({1: "a", 2: "b"})
        loader = BatchLoader(fetch)
        await asyncio.gather(*loader.load_many([1, 2]))

        loader.clear_all()
        await asyncio.gather(*loader.load_many([1, 2]))

        assert fetch.calls == [[1, 2], [1, 2]]

    @pytest.mark.asyncio
    async def test_clear_does_not_affect_in_flight_handle(self) -> None:
        fetch = RecordingFetch({1: "a"})
        loader = BatchLoader(fetch)

        handle = loader.load(1)
        loader.clear(1)

        assert (await handle) == Ok("a")
        assert fetch.calls == [[1]]

    @pytest.mark.asyncio
    async def test_prime_skips_fetch(self) -> None:
        fetch = RecordingFetch()
        loader = BatchLoader(fetch)

        loader.prime(1, "primed")

        assert (await loader.load(1)) == Ok("primed")
        assert fetch.calls == []

    @pytest.mark.asyncio
    async def test_prime_respects_existing_entry_unless_forced(self) -> None:
        loader = BatchLoader(RecordingFetch({1: "fetched"}))
        await loader.load(1)

        loader.prime(1, "ignored")
        assert (await loader.load(1)) == Ok("fetched")

        loader.prime(1, "forced", force=True)
        assert (await loader.load(1)) == Ok("forced")

    @pytest.mark.asyncio
    async def test_prime_coerces_none_and_exceptions(self) -> None:
        loader = BatchLoader(RecordingFetch())
        error = LookupError("gone")

        loader.prime(1, None).prime(2, error)

        assert (await loader.load(1)) == NotFound(1)
        assert (await loader.load(2)) == Err(error)

    @pytest.mark.asyncio
    async def test_cache_disabled_refetches_across_windows(self) -> None:
        fetch = RecordingFetch({1: "a"})
        loader = BatchLoader(fetch, cache=False)

        first, second = loader.load(1), loader.load(1)
        assert (await first) is (await second)
        await loader.load(1)

        assert fetch.calls == [[1], [1]]

    @pytest.mark.asyncio
    async def test_prime_is_ignored_when_cache_disabled(self) -> None:
        fetch = RecordingFetch({1: "fetched"})
        loader = BatchLoader(fetch, cache=False)

        loader.prime(1, "primed")

        assert (await loader.load(1)) == Ok("fetched")

    @pytest.mark.asyncio
    async def test_clear_then_rejoining_open_window_stays_memoized(self) -> None:
        fetch = RecordingFetch({1: "a"})
        loader = BatchLoader(fetch)

        first = loader.load(1)
        loader.clear(1)
        second = loader.load(1)
        await asyncio.gather(first, second)

        assert (await loader.load(1)) == Ok("a")
        assert fetch.calls == [[1]]


class TestCancellation:
    """Cancelling one caller's await does not affect other callers."""

    @pytest.mark.asyncio
    async def test_timed_out_caller_leaves_sibling_and_memo_intact(self) -> None:
        gate = asyncio.Event()
        calls: list[list[int]] = []

        async def fetch(keys: list[int]) -> list[str]:
            calls.append(list(keys))
            await gate.wait()
            return [f"row-{key}" for key in keys]

        loader = BatchLoader(fetch)
        patient = loader.load(1)
        impatient = loader.load(1)

        with pytest.raises(TimeoutError):
            await asyncio.wait_for(impatient, 0.01)
        gate.set()

        assert (await patient) == Ok("row-1")
        later = loader.load(1)
        assert (await later) == Ok("row-1")
        assert calls == [[1]]

    @pytest.mark.asyncio
    async def test_cancelled_gather_does_not_poison_memoized_key(self) -> None:
        fetch = RecordingFetch({1: "a", 2: "b"})
        loader = BatchLoader(fetch)

        joined = loader.load(1)
        group = asyncio.gather(*loader.load_many([1, 2]))
        group.cancel()

        assert (await joined) == Ok("a")
        assert (await loader.load(2)) == Ok("b")
        assert fetch.calls == [[1, 2]]

    @pytest.mark.asyncio
    async def test_cancelled_flush_forgets_unsettled_keys(self) -> None:
        started = asyncio.Event()
        calls: list[list[int]] = []

        async def fetch(keys: list[int]) -> list[int]:
            calls.append(list(keys))
            if len(calls) == 1:
                started.set()
                await asyncio.Event().wait()
            return list(keys)

        loader = BatchLoader(fetch)
        handle = loader.load(1)
        await started.wait()

        loader._flush_task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await handle

        assert (await loader.load(1)) == Ok(1)
        assert calls == [[1], [1]]


class TestCycles:
    """Flush cycles and explicit flush."""

    @pytest.mark.asyncio
    async def test_load_during_in_flight_fetch_joins_next_cycle(self) -> None:
        gate = asyncio.Event()
        calls: list[list[int]] = []

        async def fetch(keys: list[int]) -> list[int]:
            calls.append(list(keys))
            if len(calls) == 1:
                await gate.wait()
            return [key * 10 for key in keys]

        loader = BatchLoader(fetch)
        first = loader.load(1)
        await _until(lambda: calls)

        second = loader.load(2)
        for _ in range(10):
            await asyncio.sleep(0)

        assert calls == [[1]]
        assert not first.done()
        assert not second.done()

        gate.set()
        assert (await first) == Ok(10)
        assert (await second) == Ok(20)
        assert calls == [[1], [2]]

    @pytest.mark.asyncio
    async def test_explicit_flush_settles_current_window(self) -> None:
        fetch = RecordingFetch({1: "a", 2: "b"})
        loader = BatchLoader(fetch)

        handles = loader.load_many([1, 2])
        await loader.flush()

        assert all(handle.done() for handle in handles)
        assert fetch.calls == [[1, 2]]

        # The scheduled flush finds nothing left to do
        for _ in range(5):
            await asyncio.sleep(0)
        assert fetch.calls == [[1, 2]]

    @pytest.mark.asyncio
    async def test_flush_with_empty_window_is_a_no_op(self) -> None:
        fetch = RecordingFetch()
        loader = BatchLoader(fetch)

        await loader.flush()

        assert fetch.calls == []

    @pytest.mark.asyncio
    async def test_instances_do_not_share_state(self) -> None:
        fetch = RecordingFetch({1: "a"})
        first, second = BatchLoader(fetch), BatchLoader(fetch)

        await first.load(1)
        await second.load(1)

        assert fetch.calls == [[1], [1]]
