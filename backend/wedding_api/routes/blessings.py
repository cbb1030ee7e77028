"""
Wedding Gallery Backend — Blessing Route Handlers
===================================================

What:  Handles POST /api/blessings (create) and GET /api/blessings (list).
How:   Parses the JSON body, delegates to BlessingService, returns JSON.
Who:   Called by the frontend guestbook.

Status codes:
    201  blessing created (body is the stored blessing)
    400  name or message missing/blank
    500  durable store unreachable (memory store never fails)
"""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends

from wedding_api.dependencies import get_blessing_service
from wedding_api.schemas.blessing import BlessingCreate, BlessingResponse
from wedding_api.schemas.common import ErrorResponse
from wedding_api.services.blessing_service import BlessingService


router = APIRouter(prefix="/api", tags=["Blessings"])


@router.post(
    "/blessings",
    status_code=201,
    response_model=BlessingResponse,
    responses={
        201: {"description": "Blessing stored", "model": BlessingResponse},
        400: {"description": "Name and message are required", "model": ErrorResponse},
        500: {"description": "Failed to save blessing", "model": ErrorResponse},
    },
    summary="Leave a blessing",
)
async def create_blessing(
    payload: Optional[BlessingCreate] = Body(default=None),
    service: BlessingService = Depends(get_blessing_service),
) -> BlessingResponse:
    # An empty body is treated like a body with both fields missing
    payload = payload or BlessingCreate()
    return await service.create_blessing(name=payload.name, message=payload.message)


@router.get(
    "/blessings",
    response_model=List[BlessingResponse],
    responses={
        200: {"description": "All blessings, newest first"},
        500: {"description": "Failed to fetch blessings", "model": ErrorResponse},
    },
    summary="List blessings",
)
async def list_blessings(
    service: BlessingService = Depends(get_blessing_service),
) -> List[BlessingResponse]:
    return await service.list_blessings()
