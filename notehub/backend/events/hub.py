"""
Publication Hub.

In-process fan-out of change deltas to live subscribers. Every WebSocket
subscription owns one bounded asyncio.Queue registered under the
collection it watches. Delivery is ordered per collection; nothing orders
deltas of different collections relative to each other.

A subscriber that cannot keep up is not allowed to slow anyone else down:
when its queue is full it is dropped from the hub, its backlog is cleared
and a single end-of-stream marker is queued so the reader can close the
connection and the client can resubscribe from a fresh snapshot.

The hub is created lazily on first access, sized from events.yaml.

Usage:
    from notehub.backend.events.hub import get_publication_hub

    hub = get_publication_hub()
    subscription = hub.subscribe("notes")
    try:
        while (change := await subscription.get()) is not None:
            ...
    finally:
        hub.unsubscribe(subscription)
"""

import asyncio

from notehub.backend.core.logging import get_logger
from notehub.backend.events.schemas import DocumentChange

logger = get_logger(__name__)

_hub: "PublicationHub | None" = None


class Subscription:
    """One subscriber's queue on one collection."""

    def __init__(self, collection: str, queue_size: int) -> None:
        self.collection = collection
        self.overflowed = False
        self._queue: asyncio.Queue[DocumentChange | None] = asyncio.Queue(maxsize=queue_size)

    async def get(self) -> DocumentChange | None:
        """Wait for the next delta. None means the subscription has ended."""
        return await self._queue.get()

    def pending(self) -> int:
        return self._queue.qsize()

    def _offer(self, change: DocumentChange) -> bool:
        try:
            self._queue.put_nowait(change)
        except asyncio.QueueFull:
            return False
        return True

    def _end(self) -> None:
        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(None)


class PublicationHub:
    """Registry of live subscriptions keyed by collection."""

    def __init__(self, queue_size: int = 1000) -> None:
        self.queue_size = queue_size
        self._subscriptions: dict[str, set[Subscription]] = {}

    def subscribe(self, collection: str) -> Subscription:
        subscription = Subscription(collection, self.queue_size)
        self._subscriptions.setdefault(collection, set()).add(subscription)
        logger.debug(
            "Subscriber added",
            extra={"collection": collection, "subscribers": self.subscriber_count(collection)},
        )
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        subscribers = self._subscriptions.get(subscription.collection)
        if subscribers is None:
            return
        subscribers.discard(subscription)
        if not subscribers:
            del self._subscriptions[subscription.collection]

    def dispatch(self, change: DocumentChange) -> int:
        """
        Hand a delta to every subscriber of its collection.

        Returns:
            Number of subscribers the delta was queued for
        """
        delivered = 0
        for subscription in list(self._subscriptions.get(change.collection, ())):
            if subscription._offer(change):
                delivered += 1
                continue

            subscription.overflowed = True
            self.unsubscribe(subscription)
            subscription._end()
            logger.warning(
                "Subscriber dropped after queue overflow",
                extra={"collection": change.collection, "queue_size": self.queue_size},
            )
        return delivered

    def subscriber_count(self, collection: str | None = None) -> int:
        if collection is not None:
            return len(self._subscriptions.get(collection, ()))
        return sum(len(subscribers) for subscribers in self._subscriptions.values())

    def close(self) -> None:
        """End every subscription, e.g. on application shutdown."""
        for subscribers in list(self._subscriptions.values()):
            for subscription in subscribers:
                subscription._end()
        self._subscriptions.clear()


def get_publication_hub() -> PublicationHub:
    """Get the process-wide publication hub (lazy initialization)."""
    global _hub
    if _hub is None:
        from notehub.backend.core.config import get_app_config

        queue_size = get_app_config().events.publications.subscriber_queue_size
        _hub = PublicationHub(queue_size=queue_size)
        logger.info("Publication hub created", extra={"queue_size": queue_size})
    return _hub


def shutdown_publication_hub() -> None:
    """Close every live subscription and forget the hub."""
    global _hub
    if _hub is not None:
        _hub.close()
        logger.info("Publication hub shut down")
        _hub = None
