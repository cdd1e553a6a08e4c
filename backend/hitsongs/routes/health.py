"""
Hit Songs API — Health Check Route
===================================

What:  Health check endpoint for monitoring and load balancer health checks.
How:   Runs the backend's lightweight reachability check (one single-row genres select).

Status levels:
    - healthy:   Supabase reachable
    - degraded:  Supabase unreachable or unconfigured (still HTTP 200; the
                 process itself is fine and routes answer with the remote error)
"""

import logging
import time

from fastapi import APIRouter, Request

from hitsongs import __version__
from hitsongs.schemas.catalog import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    backend = getattr(request.app.state, "backend", None)

    if backend is None:
        database = "unconfigured"
    elif await backend.health_check():
        database = "connected"
    else:
        database = "unavailable"
        logger.warning("Health check: Supabase unreachable")

    return HealthResponse(
        status="healthy" if database == "connected" else "degraded",
        version=__version__,
        database=database,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
