"""Health Probes — liveness and database readiness.

Invariants:
    - GET /health/ answers 200 whenever the process is serving requests
    - GET /health/ready answers 503 until db_manager exists and SELECT 1 succeeds
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from teambuilder.infrastructure import database

router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "teambuilder-api"
SERVICE_VERSION = "1.0.0"


@router.get("/")
async def liveness():
    return {"status": "healthy", "service": SERVICE_NAME, "version": SERVICE_VERSION}


@router.get("/ready")
async def readiness():
    """Readiness includes a database round-trip."""
    manager = database.db_manager
    db_ok = manager is not None and await manager.health_check()
    checks = {"database": "healthy" if db_ok else "unavailable"}
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "checks": checks},
        )
    return {"status": "ready", "checks": checks}
