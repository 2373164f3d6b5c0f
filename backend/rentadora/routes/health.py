"""
Rentadora API - Welcome and Health Check Routes
================================================

What:  `GET /` liveness text and `GET /health` dependency check.
Who:   Browsers hitting the root URL; Docker health checks and load balancers.

Status levels:
    - healthy:   the document store answered a ping (HTTP 200)
    - unhealthy: the store is unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Request, Response
from fastapi.responses import PlainTextResponse

from rentadora import __version__
from rentadora.schemas.resource import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

WELCOME_MESSAGE = "Bienvenido a la API de la rentadora de máquinas"

_start_time = time.time()


@router.get(
    "/",
    response_class=PlainTextResponse,
    summary="Welcome message",
    description="Plain-text liveness response.",
)
async def welcome() -> str:
    return WELCOME_MESSAGE


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Document store unreachable", "model": HealthResponse}},
    summary="Service health check",
    description=(
        "Returns the health status of the backend and its document store. "
        "Used by Docker health checks and load balancers."
    ),
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    """
    Ping the injected document store and report aggregate status.

    The ping is a `SELECT 1` for the SQL store and a no-op for the
    in-memory store.
    """
    store = request.app.state.document_store
    store_status = "connected"
    overall = "healthy"

    try:
        reachable = await store.ping()
    except Exception as e:
        logger.warning("Health check: store ping raised: %s", str(e))
        reachable = False

    if not reachable:
        store_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        store=store_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
