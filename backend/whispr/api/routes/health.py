"""Health & Readiness Probes - liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the persistence backend is unreachable (readiness)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from the
      load balancer
    - Readiness also reports unflushed state, so operators can see a backlog
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from whispr.api.dependencies import get_service
from whispr.services.whispr_service import WhisprService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "whispr-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(service: WhisprService = Depends(get_service)):
    """Readiness probe: includes persistence backend reachability."""
    backend_ok = await service.backend.health_check()
    if not backend_ok:
        logger.warning("Readiness check failed: persistence backend unavailable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "persistence_unavailable",
            },
        )
    return {
        "status": "ready",
        "checks": {"persistence": "healthy"},
        "pending_flush": service.flusher.dirty,
    }
