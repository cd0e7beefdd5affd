"""Database dependencies for FastAPI route handlers.

Two session getters exist for different use cases:

1. ``get_db_session()`` (this module): FastAPI dependency whose lifecycle is
   tied to the HTTP request. Handlers commit explicitly; anything raised
   while the session is open rolls it back.

2. ``get_async_session()`` (infra.database): framework-agnostic context
   manager for scripts and background work.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from taskboard_service.infra.database import get_async_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency for database session.

    Yields:
        Database session that is automatically closed after request.

    Example:
        @router.get("/projects")
        async def list_projects(session: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with get_async_session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
