"""
Health check endpoint for monitoring and load balancers.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from users_api.app.api.deps import get_user_service
from users_api.app.services.user_service import UserService

router = APIRouter()


@router.get("")
async def get_health(
    request: Request,
    service: UserService = Depends(get_user_service),
) -> dict:
    """Report liveness, uptime in seconds and the number of stored users."""
    config = request.app.state.settings
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - request.app.state.started_at, 3),
        "service": config.project_name,
        "version": config.api_version,
        "users": await service.repository.count(),
    }
