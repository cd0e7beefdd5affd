"""Logging infrastructure.

Structured logging with:
- JSONL format for log aggregation
- Automatic context injection (request_id, user_id, etc.)
- Lazy evaluation for expensive debug messages
- OpenTelemetry trace correlation

Basic usage:
    from taskboard_service.infra.logging import set_log_context
    import logging

    logger = logging.getLogger(__name__)

    set_log_context(request_id="abc-123", user_id=42)
    logger.info("Processing request")  # includes request_id and user_id

    from taskboard_service.infra.logging import get_lazy_logger

    lazy_logger = get_lazy_logger(__name__)
    lazy_logger.debug(lambda: f"Expensive: {compute_heavy_data()}")
"""

from taskboard_service.infra.logging.config import configure_logging, setup_logging
from taskboard_service.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    remove_from_log_context,
    set_log_context,
)
from taskboard_service.infra.logging.formatters import JSONFormatter
from taskboard_service.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "remove_from_log_context",
    "set_log_context",
    "setup_logging",
]
