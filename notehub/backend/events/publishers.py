"""
Change Publishers.

Services stage a DocumentChange on the session for every write they make.
The request's session dependency hands the staged changes to
publish_staged_changes() once the transaction has committed, or drops
them with discard_staged_changes() when it rolls back, so subscribers
never see work that did not persist.

Delivery depends on the events_publish_enabled feature flag:
    disabled -> straight into this process's PublicationHub
    enabled  -> Redis pub/sub channel {channel_prefix}.{collection}, from
                which every web process relays into its own hub

Usage:
    from notehub.backend.events.publishers import stage_change

    stage_change(session, NOTES, "added", note.id, fields)
"""

from typing import Any

import aiobreaker
import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from notehub.backend.core.logging import get_logger
from notehub.backend.core.resilience import relay_circuit_breaker, relay_retrying
from notehub.backend.events.broker import channel_for
from notehub.backend.events.hub import get_publication_hub
from notehub.backend.events.schemas import ChangeOperation, DocumentChange, DocumentChanged

logger = get_logger(__name__)

STAGED_CHANGES_KEY = "staged_changes"


def stage_change(
    session: AsyncSession,
    collection: str,
    operation: ChangeOperation,
    document_id: str,
    fields: dict[str, Any] | None = None,
) -> DocumentChange:
    """Record a change delta on the session until the transaction ends."""
    change = DocumentChange(
        collection=collection,
        operation=operation,
        document_id=document_id,
        fields=fields,
    )
    session.info.setdefault(STAGED_CHANGES_KEY, []).append(change)
    return change


def staged_changes(session: AsyncSession) -> list[DocumentChange]:
    """Changes staged on the session so far, oldest first."""
    return list(session.info.get(STAGED_CHANGES_KEY, []))


def discard_staged_changes(session: AsyncSession) -> None:
    """Forget staged changes after a rollback."""
    dropped = session.info.pop(STAGED_CHANGES_KEY, [])
    if dropped:
        logger.debug("Staged changes discarded", extra={"count": len(dropped)})


async def publish_staged_changes(session: AsyncSession) -> int:
    """
    Deliver the staged changes of a committed transaction.

    Returns:
        Number of changes published
    """
    changes = session.info.pop(STAGED_CHANGES_KEY, [])
    if not changes:
        return 0

    publisher = ChangePublisher()
    for change in changes:
        await publisher.publish(change)
    return len(changes)


def _correlation_id() -> str:
    return structlog.contextvars.get_contextvars().get("request_id", "internal")


class ChangePublisher:
    """Sends change deltas to the local hub or to Redis."""

    async def publish(self, change: DocumentChange) -> None:
        from notehub.backend.core.config import get_app_config

        config = get_app_config()
        if not config.features.events_publish_enabled:
            get_publication_hub().dispatch(change)
            return

        channel = channel_for(change.collection)
        event = DocumentChanged(
            source="web",
            correlation_id=_correlation_id(),
            payload=change,
        )
        try:
            await _get_publish_breaker().call_async(self._send, channel, event)
        except Exception as exc:
            # Redis is unreachable: this process's own subscribers still get the delta
            logger.error(
                "Change relay publish failed, delivering locally",
                extra={
                    "channel": channel,
                    "event_id": event.event_id,
                    "error": str(exc),
                },
            )
            get_publication_hub().dispatch(change)
            return

        logger.debug(
            "Change published",
            extra={
                "channel": channel,
                "event_type": event.event_type,
                "event_id": event.event_id,
                "operation": change.operation,
            },
        )

    async def _send(self, channel: str, event: DocumentChanged) -> None:
        from notehub.backend.core.config import get_app_config
        from notehub.backend.events.broker import get_event_broker

        broker = get_event_broker()
        async for attempt in relay_retrying(get_app_config().events.retry):
            with attempt:
                await broker.publish(event.model_dump(mode="json"), channel=channel)


_publish_breaker: aiobreaker.CircuitBreaker | None = None


def _get_publish_breaker() -> aiobreaker.CircuitBreaker:
    global _publish_breaker
    if _publish_breaker is None:
        from notehub.backend.core.config import get_app_config

        _publish_breaker = relay_circuit_breaker(get_app_config().events.circuit_breaker)
    return _publish_breaker
