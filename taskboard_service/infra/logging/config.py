"""Process-wide logging setup through ``logging.config.dictConfig``.

Handlers hang off the root logger only; module loggers propagate to it.
Records pass through ``ContextInjectingFilter`` at the handler, so the
request id and user id bound by the middleware land on every line.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from taskboard_service.core.settings.logs import LoggingSettings

logger = logging.getLogger(__name__)

_configured = False

_CONTEXT_FILTER = "taskboard_service.infra.logging.context.ContextInjectingFilter"
_JSON_FORMATTER = "taskboard_service.infra.logging.formatters.JSONFormatter"


def setup_logging(log_settings: LoggingSettings | None = None, *, force: bool = False) -> None:
    """Configure logging from settings, once per process.

    Args:
        log_settings: Settings to apply; loaded from the environment when omitted
        force: Reconfigure even if logging was already set up
    """
    global _configured

    if _configured and not force:
        return
    if log_settings is None:
        from taskboard_service.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    configure_logging(**log_settings.to_logging_kwargs())
    _configured = True


def configure_logging(
    log_level: str = "INFO",
    *,
    console_level: str | None = None,
    json_logs: bool = True,
    console_enabled: bool = True,
    file_path: str | Path | None = None,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    include_context: bool = True,
    capture_warnings: bool = True,
    service_name: str = "taskboard-service",
) -> None:
    """Apply a logging configuration built from explicit options.

    Example:
        configure_logging("DEBUG", json_logs=False)
        configure_logging(**get_logging_settings().to_logging_kwargs())
    """
    logging.captureWarnings(capture_warnings)

    formatter = "json" if json_logs else "text"
    filters = ["context"] if include_context else []
    handlers: dict[str, dict[str, Any]] = {}

    if console_enabled:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "level": (console_level or log_level).upper(),
            "formatter": formatter,
            "filters": filters,
        }
    if file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level.upper(),
            "formatter": formatter,
            "filters": filters,
            "filename": str(path),
            "maxBytes": file_max_bytes,
            "backupCount": file_backup_count,
            "encoding": "utf-8",
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": _JSON_FORMATTER,
                    "fmt_keys": {"level": "levelname", "logger": "name", "message": "message"},
                    "static": {"service": service_name},
                },
                "text": {"format": "%(asctime)s %(levelname)-8s %(name)s %(message)s"},
            },
            "filters": {"context": {"()": _CONTEXT_FILTER}},
            "handlers": handlers,
            "root": {"level": log_level.upper(), "handlers": list(handlers)},
        }
    )
    logger.debug(
        "Logging configured",
        extra={"json_logs": json_logs, "handlers": list(handlers), "level": log_level},
    )


__all__ = ["configure_logging", "setup_logging"]
