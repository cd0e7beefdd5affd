"""Shared ``model_config`` for the settings domains."""

from __future__ import annotations

from pydantic_settings import SettingsConfigDict


def env_config(prefix: str) -> SettingsConfigDict:
    """Frozen, case-insensitive settings read from ``<prefix>*`` env vars and ``.env``.

    Empty variables count as unset and unknown keys are ignored, so one
    ``.env`` file can serve every domain.
    """
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
