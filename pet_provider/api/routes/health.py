"""Health & Readiness Probes — liveness and provider readiness for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 200 only when every provider check passes:
        * database answers a ping
        * the provider was wired by the lifespan
        * the provider's table exists (migrations ran / create_all done)
    - A failing readiness response names every failed check

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
    - Table check skipped when the database is down: one root cause, one failure
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

import pet_provider.infrastructure.database as database
from pet_provider.core.pet_contract import TABLE_NAME

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "pet-provider-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness probe — database, provider wiring and the pets table."""
    checks = await _provider_checks(request)
    failed = [name for name, state in checks.items() if state != "healthy"]
    if failed:
        logger.warning(f"Readiness failed: {', '.join(failed)}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "failed": failed, "checks": checks},
        )
    return {"status": "ready", "checks": checks}


async def _provider_checks(request: Request) -> dict[str, str]:
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    provider = getattr(request.app.state, "provider", None)

    checks = {
        "database": "healthy" if db_ok else "unavailable",
        "provider": "healthy" if provider is not None else "not_initialized",
    }
    if not db_ok:
        checks[f"{TABLE_NAME}_table"] = "unknown"
    elif await manager.has_table(TABLE_NAME):
        checks[f"{TABLE_NAME}_table"] = "healthy"
    else:
        checks[f"{TABLE_NAME}_table"] = "missing"
    return checks
