"""Per-key result types for batch loading.

A batch fetch settles many keys at once, so an individual key's failure must
not unwind its siblings. Each slot is settled with one of:

- ``Ok(value)``: the key was found
- ``NotFound(key)``: the key does not exist downstream
- ``Err(error)``: this key (or its whole chunk) failed

Example:
    result = await loader.load(42)
    match result:
        case Ok(value=user):
            ...
        case NotFound():
            ...
        case Err(error=exc):
            ...

    # Or collapse to a value / exception
    user = result.unwrap()           # raises on NotFound/Err
    user = result.value_or(None)     # None on NotFound, raises on Err
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, NoReturn

from taskboard_service.core.dataloader.exceptions import KeyNotFoundError


@dataclass(frozen=True, slots=True)
class Ok[V]:
    """Successful lookup."""

    value: V

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> V:
        return self.value

    def value_or(self, default: Any = None) -> V:
        return self.value


@dataclass(frozen=True, slots=True)
class NotFound:
    """Key is absent downstream."""

    key: Hashable

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        raise KeyNotFoundError(self.key)

    def value_or(self, default: Any = None) -> Any:
        return default


@dataclass(frozen=True, slots=True)
class Err:
    """Failed lookup carrying the failure for this slot."""

    error: BaseException

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        raise self.error

    def value_or(self, default: Any = None) -> NoReturn:
        # A failure is never silently replaced by a default
        raise self.error


type Result[V] = Ok[V] | NotFound | Err


def to_result(key: Hashable, item: Any) -> Result[Any]:
    """Coerce one item returned by a batch fetch into a ``Result``.

    Results pass through unchanged, exceptions become ``Err`` and ``None``
    becomes ``NotFound``. Anything else is wrapped in ``Ok``.

    Args:
        key: Key the item was fetched for
        item: Raw item from the fetch function

    Returns:
        Result for the key
    """
    if isinstance(item, (Ok, NotFound, Err)):
        return item
    if isinstance(item, BaseException):
        return Err(item)
    if item is None:
        return NotFound(key)
    return Ok(item)


def results_from_mapping[K: Hashable, V](
    keys: Iterable[K],
    found: Mapping[K, V],
) -> list[Result[V]]:
    """Build an index-aligned result list from a lookup mapping.

    This is the usual tail of a batch fetch: query by ``IN (...)``, index the
    rows by key, then return one result per requested key.

    Args:
        keys: Requested keys, in request order
        found: Rows indexed by key

    Returns:
        One result per key, ``NotFound`` where the mapping has no entry
    """
    return [Ok(found[key]) if key in found else NotFound(key) for key in keys]


__all__ = ["Err", "NotFound", "Ok", "Result", "results_from_mapping", "to_result"]
