"""
Health Check Endpoints.

- /health: liveness, answers as long as the process serves requests
- /health/ready: readiness, probes the database, the Redis change relay
  and the live publication hub concurrently; 503 when any is unhealthy
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Any

import redis.asyncio as redis
from fastapi import APIRouter, HTTPException
from sqlalchemy import text

from notehub.backend.core import config, database
from notehub.backend.core.logging import get_logger
from notehub.backend.core.utils import utc_now
from notehub.backend.events.hub import get_publication_hub

router = APIRouter()
logger = get_logger(__name__)

CheckResult = dict[str, Any]

FAILED_STATUSES = frozenset({"unhealthy", "error"})


async def _timed(name: str, probe: Callable[[], Awaitable[None]]) -> CheckResult:
    started = time.perf_counter()
    try:
        await probe()
    except Exception as e:
        logger.warning("Health probe failed", extra={"check": name, "error": str(e)})
        return {"status": "unhealthy", "error": str(e)}
    return {"status": "healthy", "latency_ms": int((time.perf_counter() - started) * 1000)}


async def check_database() -> CheckResult:
    async def select_one() -> None:
        async with database.get_session_factory()() as session:
            await session.execute(text("SELECT 1"))

    return await _timed("database", select_one)


async def check_redis() -> CheckResult:
    """Redis only matters when changes are relayed through it."""
    if not config.get_app_config().relay_enabled:
        return {"status": "not_configured"}

    async def ping() -> None:
        client = redis.from_url(config.get_redis_url())
        try:
            await client.ping()
        finally:
            await client.aclose()

    return await _timed("redis", ping)


async def check_publications() -> CheckResult:
    if not config.get_app_config().features.publications_live_enabled:
        return {"status": "not_configured"}
    return {"status": "healthy", "subscribers": get_publication_hub().subscriber_count()}


@router.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check() -> dict[str, Any]:
    """
    Readiness check.

    A check that does not finish within the readiness timeout is reported
    with status "error", which also fails readiness.
    """
    probes = {
        "database": check_database,
        "redis": check_redis,
        "publications": check_publications,
    }
    checks: dict[str, CheckResult] = {
        name: {"status": "error", "error": "check did not run"} for name in probes
    }

    try:
        async with asyncio.timeout(config.get_app_config().application.timeouts.readiness):
            async with asyncio.TaskGroup() as tg:
                tasks = {name: tg.create_task(probe()) for name, probe in probes.items()}
            checks = {name: task.result() for name, task in tasks.items()}
    except* Exception as eg:
        for exc in eg.exceptions:
            logger.warning("Health check task failed", extra={"error": str(exc)})

    body = {"checks": checks, "timestamp": utc_now().isoformat()}
    failing = [name for name, check in checks.items() if check["status"] in FAILED_STATUSES]
    if failing:
        logger.warning("Readiness check failed", extra={"unhealthy": failing})
        raise HTTPException(status_code=503, detail={"status": "unhealthy", **body})

    return {"status": "healthy", **body}
