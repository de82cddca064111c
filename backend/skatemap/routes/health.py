"""
SkateMap Backend: Health Check Route
======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Checks the database (SELECT 1) and the Overpass API (circuit state,
       then GET /status) and returns an aggregate status.

Status levels:
    - healthy:   Database and Overpass reachable (HTTP 200)
    - degraded:  Overpass down; spots and reviews still work (HTTP 200)
    - unhealthy: Database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Response
from sqlalchemy import text

from skatemap import __version__
from skatemap.database import engine
from skatemap.schemas.common import HealthResponse
from skatemap.services.overpass_service import overpass_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(response: Response) -> HealthResponse:
    db_status = "connected"
    overpass_status = "available"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    # Do not probe Overpass while the breaker is holding calls back
    if overpass_service.circuit_breaker.state == overpass_service.circuit_breaker.OPEN:
        overpass_status = "circuit_open"
    elif not await overpass_service.health_check():
        overpass_status = "unavailable"

    if overpass_status != "available" and overall == "healthy":
        overall = "degraded"

    if overall == "unhealthy":
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        overpass=overpass_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
