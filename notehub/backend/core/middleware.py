"""
Request Context Middleware.

Pure ASGI middleware, so it covers both HTTP requests and the live
publication WebSockets. For every connection it:

- takes X-Request-ID from the client or generates one
- reads X-Frontend-ID (web, mobile, cli, api; anything else is "unknown")
- binds request_id, frontend, method and path into structlog contextvars
- adds X-Request-ID and X-Response-Time to HTTP responses

Access in endpoints:
    request.state.request_id
    request.state.frontend
"""

import time
import uuid

import structlog
from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from notehub.backend.core.logging import get_logger

logger = get_logger(__name__)

KNOWN_FRONTENDS = frozenset({"web", "mobile", "cli", "api"})


def _frontend(headers: Headers) -> str:
    frontend = headers.get("x-frontend-id", "unknown").lower()
    return frontend if frontend in KNOWN_FRONTENDS else "unknown"


class RequestContextMiddleware:
    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        request_id = headers.get("x-request-id") or str(uuid.uuid4())
        frontend = _frontend(headers)

        state = scope.setdefault("state", {})
        state["request_id"] = request_id
        state["frontend"] = frontend

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            frontend=frontend,
            method=scope.get("method", "WEBSOCKET"),
            path=scope["path"],
        )

        started = time.perf_counter()
        status_code: int | None = None

        def elapsed_ms() -> int:
            return int((time.perf_counter() - started) * 1000)

        async def send_with_context(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                response_headers = MutableHeaders(scope=message)
                response_headers["X-Request-ID"] = request_id
                response_headers["X-Response-Time"] = f"{elapsed_ms()}ms"
            await send(message)

        client = scope.get("client")
        logger.debug("Request started", extra={"client_host": client[0] if client else None})

        try:
            await self.app(scope, receive, send_with_context)
        except Exception as exc:
            logger.error(
                "Request failed with exception",
                extra={"duration_ms": elapsed_ms(), "error_type": type(exc).__name__},
            )
            raise
        else:
            logger.debug(
                "Request completed",
                extra={"status_code": status_code, "duration_ms": elapsed_ms()},
            )
        finally:
            structlog.contextvars.clear_contextvars()
