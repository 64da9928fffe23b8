"""
NoteHub ASGI application.

    uvicorn notehub.backend.main:app

REST routes live under the configured api_prefix (/api/v1), health checks
at the root. The lifespan starts the Redis change relay when events_enabled
is set. On shutdown it ends every live subscriber of the PublicationHub and
disposes the database engine.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notehub.backend.api import health
from notehub.backend.api.v1 import router as api_v1_router
from notehub.backend.core.config import get_app_config
from notehub.backend.core.database import dispose_engine
from notehub.backend.core.exception_handlers import register_exception_handlers
from notehub.backend.core.logging import get_logger, setup_logging
from notehub.backend.core.middleware import RequestContextMiddleware
from notehub.backend.events.hub import shutdown_publication_hub

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    config = get_app_config()
    setup_logging(level=config.logging.level)
    logger.info(
        "NoteHub starting",
        extra={
            "env": config.application.environment,
            "relay": config.features.events_enabled,
            "publish_to_redis": config.features.events_publish_enabled,
            "live_publications": config.features.publications_live_enabled,
        },
    )

    relay_started = False
    if config.features.events_enabled:
        from notehub.backend.events.broker import start_change_relay

        await start_change_relay()
        relay_started = True

    try:
        yield
    finally:
        logger.info("NoteHub shutting down")
        if relay_started:
            from notehub.backend.events.broker import stop_change_relay

            await stop_change_relay()
        # Open live connections receive their end marker and close
        shutdown_publication_hub()
        await dispose_engine()


def create_app() -> FastAPI:
    config = get_app_config()
    settings = config.application
    docs = settings.debug or config.features.api_docs_enabled

    app = FastAPI(
        title=settings.name,
        description=settings.description,
        version=settings.version,
        docs_url="/docs" if docs else None,
        redoc_url="/redoc" if docs else None,
        lifespan=lifespan,
    )

    if settings.cors.origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors.origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    # Added last so it wraps CORS and sees every request first
    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)
    app.include_router(health.router, tags=["health"])
    app.include_router(api_v1_router, prefix=settings.api_prefix)
    return app


def get_app() -> FastAPI:
    """The process-wide application, created on first use so importing this module never reads config."""
    global _app
    if _app is None:
        _app = create_app()
    return _app


def __getattr__(name: str) -> FastAPI:
    # Module-level `app` for uvicorn, resolved lazily
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
