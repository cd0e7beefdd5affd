"""In-process event broker for GraphQL subscriptions.

Mutations publish after their transaction commits; every live subscription
to the topic gets its own bounded queue. Events stay inside this process.

Usage in mutation resolvers:
    from taskboard_service.features.graphql.events import Topic, get_event_broker

    await get_event_broker().publish(Topic.PROJECT_CREATED, ProjectType.from_model(project))
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)


class Topic(StrEnum):
    PROJECT_CREATED = "PROJECT_CREATED"
    TASK_CREATED = "TASK_CREATED"


class EventBroker:
    """Fan-out of published payloads to per-subscriber queues.

    A subscriber that falls ``queue_size`` events behind misses the
    overflow; publishers never block.

    Example:
        broker = EventBroker(queue_size=100)
        async for project in broker.subscribe(Topic.PROJECT_CREATED):
            ...
    """

    def __init__(self, queue_size: int = 100) -> None:
        self.queue_size = queue_size
        self._queues: dict[str, set[asyncio.Queue[Any]]] = defaultdict(set)

    def subscriber_count(self, topic: str) -> int:
        return len(self._queues.get(topic, ()))

    async def publish(self, topic: str, payload: Any) -> int:
        """Deliver a payload to every current subscriber of a topic.

        Returns:
            Number of subscribers the payload was queued for
        """
        delivered = 0
        for queue in tuple(self._queues.get(topic, ())):
            try:
                queue.put_nowait(payload)
            except asyncio.QueueFull:
                logger.warning(
                    "Subscriber queue full, dropping event",
                    extra={"topic": topic, "queue_size": self.queue_size},
                )
                continue
            delivered += 1

        logger.debug("Published event", extra={"topic": topic, "subscribers": delivered})
        return delivered

    async def subscribe(self, topic: str) -> AsyncGenerator[Any]:
        """Yield payloads published to a topic until the consumer stops."""
        queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=self.queue_size)
        self._queues[topic].add(queue)
        logger.debug("Subscribed", extra={"topic": topic})
        try:
            while True:
                yield await queue.get()
        finally:
            self._queues[topic].discard(queue)
            if not self._queues[topic]:
                del self._queues[topic]
            logger.debug("Unsubscribed", extra={"topic": topic})


_broker: EventBroker | None = None


def get_event_broker() -> EventBroker:
    """Process-wide broker, sized from GraphQL settings on first use."""
    global _broker

    if _broker is None:
        from taskboard_service.core.settings import get_graphql_settings

        _broker = EventBroker(queue_size=get_graphql_settings().subscription_queue_size)
    return _broker


def set_event_broker(broker: EventBroker | None) -> None:
    """Replace the process-wide broker; None rebuilds it on next use."""
    global _broker
    _broker = broker


__all__ = ["EventBroker", "Topic", "get_event_broker", "set_event_broker"]
