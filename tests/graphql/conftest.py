"""GraphQL test fixtures.

Provides:
- Seeded users, projects and tasks in the in-memory database
- A context factory building fresh request loaders over ``db_session``
- A statement recorder for asserting query counts
- A fresh event broker for subscription tests
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy import event

from taskboard_service.core.security import AuthUser, hash_password
from taskboard_service.core.settings import GraphQLSettings
from taskboard_service.features.graphql.context import GraphQLContext
from taskboard_service.features.graphql.dataloaders import create_dataloaders
from taskboard_service.features.graphql.events import EventBroker, set_event_broker
from taskboard_service.features.projects.models import Project
from taskboard_service.features.tasks.models import Task
from taskboard_service.features.users.models import User

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession


@dataclass
class Board:
    alice: User
    bob: User
    apollo: Project
    borealis: Project
    empty: Project
    tasks: list[Task]


@pytest.fixture
async def board(db_session: AsyncSession) -> Board:
    """Two users, three projects (one empty) and three tasks."""
    alice = User(
        username="alice",
        email="alice@example.com",
        password_hash=hash_password("alice-password"),
        role="admin",
    )
    bob = User(username="bob", email="bob@example.com", password_hash=hash_password("bob-password"))
    db_session.add_all([alice, bob])
    await db_session.flush()

    apollo = Project(name="Apollo", owner_id=alice.id)
    borealis = Project(name="Borealis", description="Northern lights", owner_id=bob.id)
    empty = Project(name="Empty", owner_id=alice.id)
    db_session.add_all([apollo, borealis, empty])
    await db_session.flush()

    tasks = [
        Task(title="Design", project_id=apollo.id, assignee_id=bob.id),
        Task(title="Build", project_id=apollo.id),
        Task(title="Observe", project_id=borealis.id, assignee_id=alice.id),
    ]
    db_session.add_all(tasks)
    await db_session.commit()
    return Board(alice=alice, bob=bob, apollo=apollo, borealis=borealis, empty=empty, tasks=tasks)


@pytest.fixture
def make_context(db_session: AsyncSession) -> Callable[..., GraphQLContext]:
    """Build a GraphQLContext with fresh loaders, as one request would."""

    def _make(user: AuthUser | None = None, **settings: Any) -> GraphQLContext:
        graphql_settings = GraphQLSettings(**settings) if settings else None
        return GraphQLContext(
            session=db_session,
            loaders=create_dataloaders(db_session, graphql_settings),
            user=user,
            request_id="test-request",
        )

    return _make


@pytest.fixture
def event_broker() -> Iterator[EventBroker]:
    """Install a fresh process-wide broker for the test."""
    broker = EventBroker(queue_size=10)
    set_event_broker(broker)
    try:
        yield broker
    finally:
        set_event_broker(None)


@pytest.fixture
def statements(db_engine: AsyncEngine) -> Iterator[list[str]]:
    """Record every SQL statement executed while the test runs."""
    recorded: list[str] = []

    def _record(conn, cursor, statement, parameters, context, executemany) -> None:  # noqa: ANN001
        recorded.append(statement)

    event.listen(db_engine.sync_engine, "before_cursor_execute", _record)
    try:
        yield recorded
    finally:
        event.remove(db_engine.sync_engine, "before_cursor_execute", _record)


def selects_from(statements: list[str], table: str) -> int:
    """Count SELECT statements reading from ``table``."""
    return sum(
        1
        for statement in statements
        if statement.lstrip().upper().startswith("SELECT") and f"FROM {table}" in statement
    )
