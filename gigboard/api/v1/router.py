"""
API v1 router for Gigboard Service.
"""

from datetime import datetime, timezone
from fastapi import APIRouter

from ...schemas.common import HealthCheckResponse
from ..dependencies import db_connection, redis_connection
from .applications import router as applications_router
from .events import router as events_router
from .messages import router as messages_router
from .users import router as users_router

router = APIRouter(prefix="/api/v1")

# Include sub-routers
router.include_router(users_router)
router.include_router(events_router)
router.include_router(applications_router)
router.include_router(messages_router)


@router.get("/health", response_model=HealthCheckResponse, tags=["Health"])
async def health_check():
    """
    Detailed health check. Redis is optional; the database is not.
    """
    database_ok = db_connection.health_check()
    if redis_connection.is_initialized:
        redis_status = "healthy" if await redis_connection.health_check() else "unhealthy"
    else:
        redis_status = "disabled"

    return HealthCheckResponse(
        status="healthy" if database_ok else "unhealthy",
        version="1.0.0",
        database="healthy" if database_ok else "unhealthy",
        redis=redis_status,
        timestamp=datetime.now(timezone.utc)
    )
