"""
LessonBook Backend — Health Check Route
=========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Pings the document store and reports aggregate status.
Who:   Called by container health checks, load balancers and monitoring.

Status levels:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response, status

from lessonbook import __version__
from lessonbook.database import DocumentStore, get_document_store
from lessonbook.schemas.documents import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
)
async def health_check(
    response: Response,
    store: DocumentStore = Depends(get_document_store),
) -> HealthResponse:
    """
    Probe the database with a `ping` command.

    A failed ping is reported, not raised: the probe itself must always
    answer.
    """
    db_status = "connected"
    overall = "healthy"

    try:
        await store.ping()
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
