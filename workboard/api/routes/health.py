"""Health Probes - liveness and readiness for the container orchestrator.

Invariants:
    - GET /health/ answers 200 while the process runs
    - GET /health/ready answers 503 until the database round-trips
    - Readiness reports live hub occupancy; the hub never makes the service unready
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

import workboard.infrastructure.database as db_module
from workboard.api.dependencies import get_broadcast_hub
from workboard.infrastructure.broadcast import BroadcastHub

router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "workboard-api"
SERVICE_VERSION = "1.0.0"


@router.get("/", status_code=status.HTTP_200_OK)
async def liveness():
    return {"status": "healthy", "service": SERVICE_NAME, "version": SERVICE_VERSION}


@router.get("/ready")
async def readiness(hub: BroadcastHub = Depends(get_broadcast_hub)):
    manager = db_module.db_manager
    if manager is None or not await manager.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy"},
        "live": await hub.stats(),
    }
