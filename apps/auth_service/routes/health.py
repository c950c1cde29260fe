"""Liveness endpoint including the session store."""

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter()

SERVICE_NAME = "auth_service"


@router.get("/health")
async def health(request: Request) -> Any:
    """Health check endpoint.

    Returns:
        200 with ``status: healthy`` when Redis answers PING, otherwise 503
    """
    components = getattr(request.app.state, "auth", None)
    redis_ok = components is not None and await components.redis.health_check()

    return JSONResponse(
        status_code=200 if redis_ok else 503,
        content={
            "status": "healthy" if redis_ok else "unhealthy",
            "service": SERVICE_NAME,
            "redis": "connected" if redis_ok else "unavailable",
        },
    )
