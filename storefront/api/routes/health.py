"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the database is unreachable (readiness)
    - No authentication on either probe
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from storefront.api.deps import get_services
from storefront.services.container import Services

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {"status": "healthy", "service": "storefront-api"}


@router.get("/ready")
async def readiness_check(services: Services = Depends(get_services)):
    """Readiness probe, includes database connectivity."""
    if not await services.storage.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy"},
        "pending_notifications": services.dispatcher.pending,
    }
