"""Middleware configuration for FastAPI application.

Both middlewares are pure ASGI so they add no task switch per request and
keep the log context visible to the route handlers they wrap.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import TYPE_CHECKING

from starlette.datastructures import MutableHeaders

from taskboard_service.infra.logging import clear_log_context, set_log_context
from taskboard_service.infra.metrics import tracking

if TYPE_CHECKING:
    from fastapi import FastAPI
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)


class RequestIDMiddleware:
    """Attach a request ID to every HTTP request.

    The ID is taken from the ``X-Request-ID`` header or generated as a
    UUID4. It is stored in ``request.state.request_id``, added to the
    logging context and echoed in the response headers. The logging context
    is cleared when the request finishes.
    """

    header_name = "x-request-id"

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        header_bytes = headers.get(self.header_name.encode("latin-1"))
        request_id = header_bytes.decode("latin-1") if header_bytes else str(uuid.uuid4())

        scope.setdefault("state", {})["request_id"] = request_id
        set_log_context(request_id=request_id)

        async def send_with_header(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message).append(self.header_name, request_id)
            await send(message)

        try:
            await self.app(scope, receive, send_with_header)
        finally:
            clear_log_context()


class MetricsMiddleware:
    """Record request count and latency, and add ``X-Process-Time``.

    Uses the route path template as the endpoint label so
    ``/api/v1/tasks/{task_id}`` is one series rather than one per ID.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start_time = time.perf_counter()
        status_code = 500  # unless a response starts

        async def send_with_timing(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                duration = time.perf_counter() - start_time
                MutableHeaders(scope=message).append("x-process-time", f"{duration:.6f}")
            await send(message)

        try:
            await self.app(scope, receive, send_with_timing)
        finally:
            route = scope.get("route")
            endpoint = getattr(route, "path", None) or scope.get("path", "")
            tracking.track_request(
                scope.get("method", ""), endpoint, status_code, time.perf_counter() - start_time,
            )


def configure_middleware(app: FastAPI) -> None:
    """Configure middleware for the application.

    Starlette runs the last added middleware first, so the request ID is
    in place before metrics and handlers run.

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)
    logger.debug("Middleware configured")


__all__ = ["MetricsMiddleware", "RequestIDMiddleware", "configure_middleware"]
