"""
Change Relay Consumer.

Subscribes to every change channel ({channel_prefix}.*) and hands each
delta to this process's PublicationHub. Every web process runs one, so a
mutation committed by any process reaches every live subscriber.

Registered by events.broker.start_change_relay().
"""

from faststream.redis import PubSub

from notehub.backend.core.logging import get_logger
from notehub.backend.events.broker import channel_for, get_event_broker
from notehub.backend.events.hub import get_publication_hub
from notehub.backend.events.schemas import DocumentChanged

logger = get_logger(__name__)

broker = get_event_broker()

CHANNEL_PATTERN = channel_for("*")


@broker.subscriber(channel=PubSub(CHANNEL_PATTERN, pattern=True))
async def relay_document_changed(data: dict) -> None:
    """Deliver a relayed publications.document.changed event locally."""
    event = DocumentChanged(**data)
    delivered = get_publication_hub().dispatch(event.payload)

    logger.debug(
        "Change delivered to local subscribers",
        extra={
            "collection": event.payload.collection,
            "operation": event.payload.operation,
            "document_id": event.payload.document_id,
            "subscribers": delivered,
        },
    )
