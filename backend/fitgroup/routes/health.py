"""
FitGroup Backend — Health Check Route
=====================================

What:  Health check endpoint for monitoring and load balancer checks.
Why:   A service is only "healthy" if it can reach its database; everything
       the API does goes through it.
How:   Runs SELECT 1 on the application's engine and reports uptime.

Status levels:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request, Response, status
from sqlalchemy import text

from fitgroup import __version__
from fitgroup.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with request.app.state.database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
