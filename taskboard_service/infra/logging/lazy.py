"""Lazy evaluation support for logging.

Debug lines on hot paths (repositories, batch loaders) often format state
that is expensive to render. Passing a callable defers that work until the
level is known to be enabled.
"""

from __future__ import annotations

import logging
from typing import Any


class LazyLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that evaluates callable messages and arguments lazily.

    ``LoggerAdapter.debug/info/...`` all delegate to ``log()``, so the level
    check and evaluation live in one place.

    Example:
        ```python
        logger = LazyLoggerAdapter(logging.getLogger(__name__), {})
        logger.debug(lambda: f"dispatch: {len(keys)} keys")
        logger.info("Loaded %s", lambda: describe(rows))
        ```
    """

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        """Log message, evaluating callables only if the level is enabled.

        Args:
            level: Numeric log level (e.g., logging.DEBUG).
            msg: Log message or callable returning message.
            *args: Format arguments (may include callables).
            **kwargs: Additional kwargs for logging.
        """
        if not self.isEnabledFor(level):
            return

        if callable(msg):
            msg = msg()
        if args:
            args = tuple(arg() if callable(arg) else arg for arg in args)

        super().log(level, msg, *args, **kwargs)


def get_lazy_logger(name: str, **context: Any) -> LazyLoggerAdapter:
    """Get logger with lazy evaluation support.

    Args:
        name: Logger name (usually __name__ or a component name).
        **context: Optional context bound into every record's extra.

    Returns:
        Logger adapter with lazy evaluation support.

    Example:
        ```python
        lazy_logger = get_lazy_logger("repository.User")
        lazy_logger.debug(lambda: f"db.get_many_by_ids: {len(ids)} ids")
        ```
    """
    return LazyLoggerAdapter(logging.getLogger(name), context or {})
