"""Repository for the users feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import or_, select

from taskboard_service.core.database.repository import BaseRepository
from taskboard_service.features.users.models import User

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class UserRepository(BaseRepository[User]):
    """Repository for User model.

    Inherits get/get_or_raise/get_by/list/get_many_by_ids/create/update/delete
    from BaseRepository.
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_email(self, session: AsyncSession, email: str) -> User | None:
        return await self.get_by(session, User.email, email)

    async def find_conflicting(
        self,
        session: AsyncSession,
        *,
        username: str,
        email: str,
    ) -> User | None:
        """Return a user that already holds this username or email, if any."""
        stmt = select(User).where(or_(User.username == username, User.email == email)).limit(1)
        result = await session.execute(stmt)
        user = result.scalar_one_or_none()

        self._lazy.debug(
            lambda: f"db.find_conflicting(username={username!r}) -> {user is not None}"
        )
        return user


_user_repository: UserRepository | None = None


def get_user_repository() -> UserRepository:
    """Get the shared UserRepository instance.

    Repositories hold no session state, so one instance serves all requests.
    """
    global _user_repository
    if _user_repository is None:
        _user_repository = UserRepository()
    return _user_repository
