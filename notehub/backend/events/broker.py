"""
Change Relay Broker.

One FastStream RedisBroker per web process. Writers publish each committed
delta on the pub/sub channel of its collection; every process subscribes
to all of them and feeds its own PublicationHub.

    channel_for("notes")  ->  "changes.notes"
    channel_for("*")      ->  "changes.*"   (the relay subscription pattern)
"""

from faststream.redis import RedisBroker

from notehub.backend.core.logging import get_logger

logger = get_logger(__name__)

_broker: RedisBroker | None = None


def channel_for(collection: str) -> str:
    from notehub.backend.core.config import get_app_config

    return f"{get_app_config().events.channel_prefix}.{collection}"


def get_event_broker() -> RedisBroker:
    """The process-wide broker, built on first use from REDIS_URL."""
    global _broker
    if _broker is None:
        from notehub.backend.core.config import get_redis_url
        from notehub.backend.events.middleware import ChangeRelayMiddleware

        _broker = RedisBroker(get_redis_url(), middlewares=[ChangeRelayMiddleware])
        logger.debug("Change relay broker created")
    return _broker


async def start_change_relay() -> RedisBroker:
    """Subscribe to every change channel and connect; called from the lifespan."""
    broker = get_event_broker()

    # Importing the consumer module registers its subscriber on the broker
    from notehub.backend.events.consumers import changes  # noqa: F401

    await broker.start()
    logger.info("Change relay started", extra={"pattern": channel_for("*")})
    return broker


async def stop_change_relay() -> None:
    global _broker
    if _broker is None:
        return
    await _broker.close()
    _broker = None
    logger.info("Change relay stopped")
