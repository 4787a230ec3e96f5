"""
Copydesk Backend — Health Check Route
=======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Checks the database (SELECT 1) and the generation API (list models).

Status levels:
    - healthy:   All dependencies operational
    - degraded:  Generation API unreachable (login/verify still work)
    - unhealthy: Database unreachable (nothing works)
"""

import logging
import time

from fastapi import APIRouter, Request
from sqlalchemy import text

from copydesk import __version__
from copydesk.database import engine
from copydesk.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    db_status = "connected"
    llm_status = "available"
    overall = "healthy"

    # ── Check Database ────────────────────────────────────────────────────
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    # ── Check Generation API ──────────────────────────────────────────────
    # health_check() never raises
    if not await request.app.state.llm_service.health_check():
        llm_status = "unavailable"
        overall = "degraded" if overall != "unhealthy" else overall

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        llm=llm_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
