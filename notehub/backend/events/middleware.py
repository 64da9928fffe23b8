"""
Change Relay Middleware.

Wraps every delta the relay consumer takes off Redis. While it is handled,
structlog carries the correlation_id of the request that made the change
plus the collection, operation and document_id of the delta, so one
mutation can be followed from the writing process into every relaying one.
"""

import time
from typing import Any

import structlog
from faststream import BaseMiddleware

from notehub.backend.core.logging import get_logger

logger = get_logger(__name__)

RELAY_CONTEXT_KEYS = ("correlation_id", "event_id", "collection", "operation", "document_id", "source")


def relay_context(body: Any) -> dict[str, str]:
    """Log context for a relayed DocumentChanged body; unknown shapes give placeholders."""
    if hasattr(body, "model_dump"):
        body = body.model_dump(mode="json")
    if not isinstance(body, dict):
        body = {}
    payload = body.get("payload")
    if not isinstance(payload, dict):
        payload = {}

    return {
        "correlation_id": body.get("correlation_id", "unknown"),
        "event_id": body.get("event_id", "unknown"),
        "collection": payload.get("collection", "unknown"),
        "operation": payload.get("operation", "unknown"),
        "document_id": payload.get("document_id", "unknown"),
        "source": "relay",
    }


class ChangeRelayMiddleware(BaseMiddleware):
    async def on_consume(self, msg):
        body = getattr(msg, "decoded_body", None)
        if body is None:
            body = getattr(msg, "_decoded_body", msg)
        structlog.contextvars.bind_contextvars(**relay_context(body))
        self._started = time.perf_counter()
        return await super().on_consume(msg)

    async def after_consume(self, err):
        elapsed_ms = round((time.perf_counter() - getattr(self, "_started", time.perf_counter())) * 1000, 1)
        if err is not None:
            logger.error("Relayed change not delivered", extra={"elapsed_ms": elapsed_ms, "error": str(err)})
        else:
            logger.debug("Relayed change delivered", extra={"elapsed_ms": elapsed_ms})

        structlog.contextvars.unbind_contextvars(*RELAY_CONTEXT_KEYS)
        return await super().after_consume(err)
