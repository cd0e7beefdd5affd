"""Helper functions for tracking operational metrics."""

from __future__ import annotations

import logging
from typing import Any

from taskboard_service.infra.metrics import prometheus

logger = logging.getLogger(__name__)


# ============================================================================
# Error Tracking
# ============================================================================


def track_error(
    error_type: str,
    endpoint: str,
    status_code: int,
    extra: dict[str, Any] | None = None,
) -> None:
    """Track an error occurrence.

    Args:
        error_type: Type of error (e.g., 'validation-error', 'not-found')
        endpoint: API endpoint where error occurred
        status_code: HTTP status code
        extra: Additional context for logging

    Example:
            track_error("validation-error", "/api/v1/tasks", 422, {"field": "title"})
    """
    prometheus.errors_total.labels(
        error_type=error_type,
        endpoint=endpoint,
        status_code=str(status_code),
    ).inc()

    logger.debug(
        f"Tracked error: {error_type}",
        extra={"endpoint": endpoint, "status_code": status_code, **(extra or {})},
    )


# ============================================================================
# HTTP Tracking
# ============================================================================


def track_request(method: str, endpoint: str, status_code: int, duration: float) -> None:
    """Record a completed HTTP request."""
    prometheus.http_requests_total.labels(
        method=method, endpoint=endpoint, status=str(status_code)
    ).inc()
    prometheus.http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(
        duration
    )


# ============================================================================
# Batch Loader Tracking
# ============================================================================


def track_dataloader_batch(loader: str, size: int) -> None:
    """Record one downstream batch fetch call.

    Args:
        loader: Loader name
        size: Number of unique keys in the call
    """
    prometheus.dataloader_batches_total.labels(loader=loader).inc()
    prometheus.dataloader_batch_size.labels(loader=loader).observe(size)


def track_dataloader_failure(loader: str, reason: str) -> None:
    """Record a failed batch fetch.

    Args:
        loader: Loader name
        reason: 'fetch' (the call raised) or 'contract' (misaligned results)
    """
    prometheus.dataloader_batch_failures_total.labels(loader=loader, reason=reason).inc()
