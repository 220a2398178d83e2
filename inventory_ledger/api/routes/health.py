"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from inventory_ledger import __version__
from inventory_ledger.application.dto.responses import HealthResponse
from inventory_ledger.config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check.

    Returns service status and uptime.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/db", response_model=HealthResponse)
async def database_health() -> HealthResponse:
    """Check that the database answers a trivial query."""
    import aiosqlite

    from inventory_ledger.core.exceptions import DatabaseError
    from inventory_ledger.infrastructure.storage.sqlite import get_connection

    database = "ok"
    try:
        async with get_connection() as conn:
            await conn.execute("SELECT 1")
    except (DatabaseError, aiosqlite.Error, OSError) as e:
        logger.warning("database_health_failed", error=str(e))
        database = "unavailable"

    return HealthResponse(
        status="healthy" if database == "ok" else "degraded",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        database=database,
    )
