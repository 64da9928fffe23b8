"""
Database Engine and Request Sessions.

The engine and session factory are created on first use, so importing
this module never reads configuration or secrets.

Every request gets one session and therefore one transaction: services
flush as they go, get_db_session commits once at the end and rolls back
on any error. Change deltas staged during the request reach live
subscribers only after the commit succeeded.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from notehub.backend.core.config_schema import DatabaseSchema
from notehub.backend.core.logging import get_logger

logger = get_logger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def configure_sqlite(engine: AsyncEngine) -> None:
    """
    Make SQLite enforce foreign keys and honour SAVEPOINTs.

    The driver opens transactions lazily on its own, which lets a RELEASE
    SAVEPOINT commit the whole transaction. With its handling switched off
    SQLAlchemy emits BEGIN itself, so nested transactions stay nested.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")


def engine_options(url: str, db_config: DatabaseSchema) -> dict[str, Any]:
    """Keyword arguments for create_async_engine; SQLite takes no pool sizing."""
    options: dict[str, Any] = {"echo": db_config.echo}
    if not url.startswith("sqlite"):
        options.update(
            pool_size=db_config.pool_size,
            max_overflow=db_config.max_overflow,
            pool_timeout=db_config.pool_timeout,
            pool_recycle=db_config.pool_recycle,
            pool_pre_ping=True,
        )
    return options


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        from notehub.backend.core.config import get_app_config, get_database_url

        url = get_database_url()
        _engine = create_async_engine(url, **engine_options(url, get_app_config().database))
        if url.startswith("sqlite"):
            configure_sqlite(_engine)
        logger.debug("Database engine created", extra={"dialect": _engine.dialect.name})
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(), class_=AsyncSession, expire_on_commit=False)
    return _session_factory


async def dispose_engine() -> None:
    """Close pooled connections on shutdown. A no-op if no request ever used the database."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.debug("Database engine disposed")
    _engine = None
    _session_factory = None


async def create_all_tables() -> None:
    """Create every mapped table directly, bypassing alembic (run.py --action init-db)."""
    from notehub.backend.models import Base

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session: commit, then deliver staged change deltas.

    On any exception the transaction is rolled back and the staged deltas
    are dropped, so subscribers never see a write that did not persist.
    """
    from notehub.backend.events.publishers import discard_staged_changes, publish_staged_changes

    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            discard_staged_changes(session)
            raise
        await publish_staged_changes(session)
