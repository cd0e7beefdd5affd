"""Database infrastructure: engine, session factory and lifecycle."""

from taskboard_service.infra.database.session import (
    AsyncSessionLocal,
    close_database,
    create_tables,
    engine,
    get_async_session,
    init_database,
)

__all__ = [
    "AsyncSessionLocal",
    "close_database",
    "create_tables",
    "engine",
    "get_async_session",
    "init_database",
]
