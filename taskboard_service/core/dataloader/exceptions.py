"""Batch loader exceptions.

Failures are delivered to call sites as ``Err`` results rather than raised,
with the exception of ``InvalidKeyError`` which is raised directly from
``load()`` because it is a misuse of a single call, not a batch outcome.
"""

from __future__ import annotations

from typing import Any


class DataLoaderError(Exception):
    """Base exception for batch loader failures.

    Attributes:
        message: Error description
        details: Additional context about the failure
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize loader error.

        Args:
            message: Error description
            details: Additional context about the failure
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Format error message with details."""
        if self.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class InvalidKeyError(DataLoaderError, TypeError):
    """Key passed to ``load()`` is absent or cannot be hashed."""

    def __init__(self, key: Any, reason: str) -> None:
        """Initialize invalid key error.

        Args:
            key: The rejected key
            reason: Why the key was rejected
        """
        self.key = key
        super().__init__(f"Invalid loader key: {reason}", details={"key": key})


class KeyNotFoundError(DataLoaderError, LookupError):
    """Raised when a ``NotFound`` result is unwrapped."""

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__("Key not found", details={"key": key})


class BatchContractError(DataLoaderError):
    """Batch fetch returned results that are not index-aligned with its keys.

    Raised (as an ``Err`` result) for every slot of the offending chunk. The
    loader never guesses at alignment.
    """

    def __init__(self, expected: int, received: int | None, loader: str | None = None) -> None:
        """Initialize contract error.

        Args:
            expected: Number of keys passed to the fetch function
            received: Number of results returned (None if not a sequence)
            loader: Loader name for diagnostics
        """
        self.expected = expected
        self.received = received
        if received is None:
            message = "Batch fetch must return a sequence of results"
        else:
            message = (
                "Batch fetch must return exactly one result per key "
                f"(expected {expected}, got {received})"
            )
        details: dict[str, Any] = {"expected": expected, "received": received}
        if loader:
            details["loader"] = loader
        super().__init__(message, details=details)


class BatchFetchError(DataLoaderError):
    """The batch fetch call itself failed.

    The original exception is kept as ``cause`` and chained via ``__cause__``.
    """

    def __init__(self, cause: BaseException, keys: list[Any], loader: str | None = None) -> None:
        """Initialize fetch error.

        Args:
            cause: Exception raised by the fetch function
            keys: Keys of the chunk whose fetch failed
            loader: Loader name for diagnostics
        """
        self.cause = cause
        self.keys = keys
        details: dict[str, Any] = {"keys": len(keys), "cause": type(cause).__name__}
        if loader:
            details["loader"] = loader
        super().__init__(f"Batch fetch failed: {cause}", details=details)
        self.__cause__ = cause


__all__ = [
    "BatchContractError",
    "BatchFetchError",
    "DataLoaderError",
    "InvalidKeyError",
    "KeyNotFoundError",
]
