# WORKFLOW: Health check endpoints for monitoring and operational status.
# Used by: Load balancers, monitoring systems, operational dashboards
# Endpoints:
# 1. /healthz - Basic health check (always returns healthy)
# 2. /readyz - Readiness check against the catalog database
# 3. /livez - Liveness check for Kubernetes
#
# Readiness flow: Readiness check -> SELECT 1 on the database -> Ready/Not ready

from datetime import datetime, timezone

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
import logging

from core.config import settings
from db.session import check_db_connection

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/healthz")
async def health_check():
    """
    Basic health check endpoint.

    Returns:
        Health status of the API
    """
    return {
        "status": "healthy",
        "timestamp": _now(),
        "version": settings.version,
        "environment": settings.environment
    }


@router.get("/readyz")
async def readiness_check():
    """
    Readiness check endpoint.

    The service is ready when the catalog database answers a trivial query.

    Returns:
        Readiness status with detailed checks, 503 when not ready
    """
    checks = {
        "database": await run_in_threadpool(check_db_connection),
    }

    is_ready = all(checks.values())
    if not is_ready:
        logger.warning(f"Readiness check failed: {checks}")

    return JSONResponse(
        status_code=status.HTTP_200_OK if is_ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if is_ready else "not_ready",
            "timestamp": _now(),
            "checks": checks,
            "version": settings.version
        },
    )


@router.get("/livez")
async def liveness_check():
    """
    Liveness check endpoint.

    Used by Kubernetes liveness checks.
    """
    return {
        "status": "alive",
        "timestamp": _now()
    }
