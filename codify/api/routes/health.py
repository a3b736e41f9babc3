"""Health Probes — liveness and database readiness.

Invariants:
    - GET /api/v1/health/ answers 200 whenever the process serves requests
    - GET /api/v1/health/ready answers 503 until the pool exists and a
      SELECT 1 round-trips through it
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

import codify.infrastructure.database as database

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/")
async def liveness():
    return {"status": "healthy", "service": "codify-api"}


@router.get("/ready")
async def readiness():
    # Read at call time: the lifespan replaces the module-level manager
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {"status": "ready", "pool": manager.engine.pool.status()}
