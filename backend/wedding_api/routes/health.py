"""
Wedding Gallery Backend — Health Check Route
==============================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Probes the blessing store and the media host and reports both.
Who:   Called by Docker health checks, load balancers, and monitoring.

Status levels:
    - healthy:   store and media host reachable
    - degraded:  at least one dependency unreachable or unconfigured
    The endpoint itself always answers 200 so that a media outage does not
    take the blessing guestbook out of rotation.
"""

import time

from fastapi import APIRouter, Depends

from wedding_api import __version__
from wedding_api.config import Settings
from wedding_api.dependencies import get_app_settings, get_blessing_service, get_media_gateway
from wedding_api.schemas.common import HealthResponse
from wedding_api.services.blessing_service import BlessingService
from wedding_api.services.media_base import MediaGateway


router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    settings: Settings = Depends(get_app_settings),
    service: BlessingService = Depends(get_blessing_service),
    gateway: MediaGateway = Depends(get_media_gateway),
) -> HealthResponse:
    """
    Check the health of the service and its dependencies.

    Check details:
        Store: in-memory is always available; database runs SELECT 1
        Media: skipped when credentials are missing, otherwise a ping
    """
    overall = "healthy"

    store_status = "available" if await service.store.health_check() else "unavailable"
    if store_status != "available":
        overall = "degraded"

    if not settings.cloudinary_configured:
        media_status = "unconfigured"
        overall = "degraded"
    elif await gateway.health_check():
        media_status = "available"
    else:
        media_status = "unavailable"
        overall = "degraded"

    return HealthResponse(
        status=overall,
        version=__version__,
        blessing_store=service.store.backend,
        store=store_status,
        media=media_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
