from fastapi import APIRouter
from sqlalchemy import text

from inventory.database import engine
from inventory.utils.cache import cache_service, redis_client

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "/",
    summary="Health check",
    description="Basic health check endpoint."
)
async def health_check():
    """Simple health check."""
    return {"status": "healthy"}


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if the database (and Redis, when caching is enabled) is ready."
)
async def readiness_check():
    """
    Readiness check for all dependencies.

    Returns status of:
    - Database connection
    - Redis connection (reported as skipped when caching is disabled)
    """
    checks = {
        "database": False,
        "redis": False
    }

    # Check database
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
            checks["database"] = True
    except Exception as e:
        checks["database_error"] = str(e)

    # Check Redis
    if not cache_service.enabled:
        checks["redis"] = "skipped"
    else:
        try:
            await redis_client.ping()
            checks["redis"] = True
        except Exception as e:
            checks["redis_error"] = str(e)

    # Determine overall status
    all_healthy = checks["database"] and checks["redis"] in (True, "skipped")

    return {
        "status": "ready" if all_healthy else "not_ready",
        "checks": checks
    }
