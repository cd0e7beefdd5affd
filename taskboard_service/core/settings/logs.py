"""Logging settings (``LOG_`` prefix)."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from ._config import env_config

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BaseSettings):
    """Where log records go and how they are rendered.

    Example: LOG_LEVEL=debug, LOG_JSON_LOGS=false, LOG_FILE_PATH=logs/taskboard.jsonl
    """

    service_name: str = Field(default="taskboard-service", description="Static `service` field of JSON records")
    level: LogLevel = Field(default="INFO", description="Root logger level")
    json_logs: bool = Field(default=True, description="JSON Lines output; plain text when false")
    console_enabled: bool = Field(default=True, description="Write to stderr")
    console_level: LogLevel | None = Field(default=None, description="Stderr threshold; root level when unset")

    file_path: Path | None = Field(default=None, description="Rotating log file; none when unset")
    file_max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024, description="Rotate after this many bytes")
    file_backup_count: int = Field(default=5, ge=0, le=100, description="Rotated files kept")

    include_context: bool = Field(default=True, description="Add request id and user id to every record")
    capture_warnings: bool = Field(default=True, description="Route `warnings` through logging")

    model_config = env_config("LOG_")

    @field_validator("level", "console_level", mode="before")
    @classmethod
    def _upper(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    def to_logging_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``infra.logging.configure_logging``."""
        return {
            "service_name": self.service_name,
            "log_level": self.level,
            "json_logs": self.json_logs,
            "console_enabled": self.console_enabled,
            "console_level": self.console_level or self.level,
            "file_path": self.file_path,
            "file_max_bytes": self.file_max_bytes,
            "file_backup_count": self.file_backup_count,
            "include_context": self.include_context,
            "capture_warnings": self.capture_warnings,
        }
