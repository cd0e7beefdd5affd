"""Generic async repository over a mapped model.

Repositories never own a session: every method takes the caller's
``AsyncSession`` and at most flushes it. Committing is left to the request
boundary (REST handler or GraphQL mutation).

Besides plain CRUD, two batch lookups back the request loaders:

- ``get_many_by_ids`` answers one loader window of primary keys with a single
  ``IN`` query, index-aligned with the requested keys.
- ``group_by`` answers a window of foreign keys, returning every requested key
  (an empty list when nothing references it).

Example:
    class ProjectRepository(BaseRepository[Project]):
        def __init__(self) -> None:
            super().__init__(Project)

    repo = ProjectRepository()
    rows = await repo.get_many_by_ids(session, [3, 1, 99])  # [p3, p1, None]
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import inspect as sa_inspect
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from taskboard_service.core.database.exceptions import ConstraintViolationError, NotFoundError
from taskboard_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Hashable, Mapping, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute


class BaseRepository[T]:
    """CRUD and batch lookups for one model class.

    Args:
        model: Mapped class with a single-column primary key
    """

    __slots__ = ("_lazy", "_logger", "model")

    def __init__(self, model: type[T]) -> None:
        self.model = model
        self._logger = logging.getLogger(f"repository.{model.__name__}")
        self._lazy = get_lazy_logger(f"repository.{model.__name__}")

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(model={self.model.__name__})>"

    # ──────────────────────────────────────────────────────────────
    # Reads
    # ──────────────────────────────────────────────────────────────

    async def get(self, session: AsyncSession, id: Any) -> T | None:  # noqa: A002
        """Return the row with primary key ``id``, or None."""
        instance = await session.get(self.model, id)
        self._lazy.debug(
            lambda: f"db.get: {self.model.__name__}({id}) -> {'hit' if instance else 'miss'}"
        )
        return instance

    async def get_or_raise(self, session: AsyncSession, id: Any) -> T:  # noqa: A002
        """Like ``get`` but a missing row is an error.

        Raises:
            NotFoundError: If no row has this primary key
        """
        instance = await self.get(session, id)
        if instance is not None:
            return instance

        self._logger.info(
            "Entity not found",
            extra={"entity": self.model.__name__, "id": str(id), "operation": "db.get_or_raise"},
        )
        raise NotFoundError(self.model.__name__, {"id": id})

    async def get_by(
        self,
        session: AsyncSession,
        attr: InstrumentedAttribute[Any],
        value: Any,
    ) -> T | None:
        """Return the first row whose ``attr`` equals ``value``.

        Example:
            user = await repo.get_by(session, User.email, "ada@example.com")
        """
        result = await session.execute(select(self.model).where(attr == value).limit(1))
        return result.scalars().first()

    async def list(
        self,
        session: AsyncSession,
        *,
        limit: int = 100,
        offset: int = 0,
    ) -> Sequence[T]:
        """Page through all rows in primary key order."""
        stmt = select(self.model).order_by(self._pk_attr()).limit(limit).offset(offset)
        result = await session.execute(stmt)
        items = result.scalars().all()
        self._lazy.debug(
            lambda: f"db.list: {self.model.__name__}(limit={limit}, offset={offset}) -> {len(items)}"
        )
        return items

    async def get_many_by_ids(self, session: AsyncSession, ids: Sequence[Any]) -> list[T | None]:
        """Fetch several rows by primary key in one query.

        The result has one entry per requested id, in request order, with
        None where no row exists. Repeated ids map to the same instance.

        Args:
            session: Database session
            ids: Primary key values

        Returns:
            Rows or None, index-aligned with ``ids``
        """
        if not ids:
            return []

        pk = self._pk_attr()
        result = await session.execute(select(self.model).where(pk.in_(set(ids))))
        found: Mapping[Any, T] = {getattr(row, pk.key): row for row in result.scalars().all()}

        self._lazy.debug(
            lambda: f"db.get_many_by_ids: {self.model.__name__} requested={len(ids)} found={len(found)}"
        )
        return [found.get(id_) for id_ in ids]

    async def group_by[K: Hashable](
        self,
        session: AsyncSession,
        attr: InstrumentedAttribute[Any],
        keys: Sequence[K],
    ) -> dict[K, list[T]]:
        """Fetch the rows whose ``attr`` is one of ``keys``, grouped by that value.

        Every requested key appears in the result, in request order. Rows
        inside a group are in primary key order.

        Example:
            tasks = await task_repo.group_by(session, Task.project_id, [1, 2])
            # {1: [Task(...), Task(...)], 2: []}
        """
        grouped: dict[K, list[T]] = {key: [] for key in keys}
        if not grouped:
            return grouped

        stmt = select(self.model).where(attr.in_(set(keys))).order_by(self._pk_attr())
        result = await session.execute(stmt)
        for row in result.scalars().all():
            grouped[getattr(row, attr.key)].append(row)

        self._lazy.debug(lambda: f"db.group_by: {self.model.__name__}.{attr.key} keys={len(grouped)}")
        return grouped

    # ──────────────────────────────────────────────────────────────
    # Writes
    # ──────────────────────────────────────────────────────────────

    async def create(self, session: AsyncSession, instance: T) -> T:
        """Insert ``instance`` and reload it so server defaults are populated.

        Raises:
            ConstraintViolationError: If the insert breaks a constraint
        """
        session.add(instance)
        await self._flush(session, "db.create")
        await session.refresh(instance)
        self._lazy.debug(lambda: f"db.create: {self.model.__name__}(id={getattr(instance, 'id', None)})")
        return instance

    async def update(
        self,
        session: AsyncSession,
        instance: T,
        values: Mapping[str, Any],
    ) -> T:
        """Assign ``values`` onto a row loaded through ``session`` and flush.

        Args:
            session: Database session
            instance: Row to change
            values: Attribute names and new values; absent names are untouched

        Raises:
            ConstraintViolationError: If the update breaks a constraint
        """
        for name, value in values.items():
            setattr(instance, name, value)
        await self._flush(session, "db.update")
        await session.refresh(instance)
        self._lazy.debug(
            lambda: f"db.update: {self.model.__name__}(id={getattr(instance, 'id', None)}) fields={sorted(values)}"
        )
        return instance

    async def delete(self, session: AsyncSession, instance: T) -> None:
        entity_id = getattr(instance, "id", None)
        await session.delete(instance)
        await self._flush(session, "db.delete")
        self._logger.info(
            "Entity deleted",
            extra={"entity": self.model.__name__, "id": str(entity_id), "operation": "db.delete"},
        )

    async def _flush(self, session: AsyncSession, operation: str) -> None:
        try:
            await session.flush()
        except IntegrityError as exc:
            reason = str(exc.orig) if exc.orig is not None else str(exc)
            self._logger.warning(
                "Constraint violation",
                extra={"entity": self.model.__name__, "reason": reason, "operation": operation},
            )
            raise ConstraintViolationError(self.model.__name__, reason) from exc

    def _pk_attr(self) -> InstrumentedAttribute[Any]:
        column = sa_inspect(self.model).primary_key[0]
        return cast("InstrumentedAttribute[Any]", getattr(self.model, column.key))


__all__ = ["BaseRepository"]
