"""Health check endpoints for monitoring application status."""

from datetime import datetime
from datetime import timezone

from fastapi import APIRouter
from fastapi import Request
from fastapi import status
from fastapi.responses import JSONResponse
from loguru import logger

ROUTER_HEALTH = APIRouter(tags=["Health"])


@ROUTER_HEALTH.get(
    "/health",
    summary="Health check endpoint",
    description="Basic health check that returns application status and metadata",
    responses={
        status.HTTP_200_OK: {
            "description": "Application is healthy",
            "content": {
                "application/json": {
                    "example": {
                        "status": "healthy",
                        "timestamp": "2026-01-05T12:00:00.000000Z",
                        "service": "User Directory API",
                        "version": "v1",
                    }
                }
            },
        }
    },
)
async def health_check(request: Request):
    """
    Basic health check endpoint.

    Returns application status and metadata. This endpoint is lightweight
    and does not touch the database.
    """
    settings = request.app.state.settings

    response_data = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.service_name,
        "version": request.app.version,
    }

    logger.debug("Health check requested", status="healthy")

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=response_data,
    )


@ROUTER_HEALTH.get("/health/live", summary="Liveness probe")
async def liveness_check():
    """Liveness probe: the process is up and serving requests."""
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={"status": "alive", "timestamp": datetime.now(timezone.utc).isoformat()},
    )


@ROUTER_HEALTH.get(
    "/health/ready",
    summary="Readiness probe",
    responses={
        status.HTTP_503_SERVICE_UNAVAILABLE: {"description": "User directory database is unreachable"},
    },
)
async def readiness_check(request: Request):
    """Readiness probe: the user directory database answers a trivial query."""
    settings = request.app.state.settings
    database_ok = await request.app.state.user_db_pool.health_check()

    response_data = {
        "status": "ready" if database_ok else "not_ready",
        "service": settings.service_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {"database": "ok" if database_ok else "unavailable"},
    }

    if not database_ok:
        logger.warning("Readiness check failed", checks=response_data["checks"])
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=response_data)

    return JSONResponse(status_code=status.HTTP_200_OK, content=response_data)
