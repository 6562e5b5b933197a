"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from invoiceflow import __version__
from invoiceflow.application.dto.responses import HealthResponse
from invoiceflow.config import get_logger, get_settings

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check.

    Pings SQLite through the pool and reports whether backup is configured.
    """
    database = "ok"
    try:
        from invoiceflow.infrastructure.storage.sqlite import get_connection

        async with get_connection() as conn:
            await conn.execute("SELECT 1")
    except Exception as e:
        logger.warning("health_database_failed", error=str(e))
        database = "unavailable"

    return HealthResponse(
        status="healthy" if database == "ok" else "degraded",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        database=database,
        backup_configured=bool(get_settings().backup.script_url),
    )
