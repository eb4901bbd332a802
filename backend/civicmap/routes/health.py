"""
CivicMap Backend — Health Check Route
======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Pings the shared document store and reports aggregate status.

Status levels:
    - healthy:   store answers the ping (HTTP 200)
    - unhealthy: store unreachable or not initialized (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request, Response

from civicmap import __version__
from civicmap.schemas.civic import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Track when the service started for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Document store unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    """Ping the document store; 503 when it does not answer."""
    store_status = "connected"
    overall = "healthy"

    store = getattr(request.app.state, "store", None)
    if store is None:
        store_status = "disconnected"
        overall = "unhealthy"
    else:
        try:
            await store.ping()
        except Exception as e:
            store_status = "disconnected"
            overall = "unhealthy"
            logger.warning("Health check: document store unreachable: %s", str(e))

    if overall != "healthy":
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        store=store_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
