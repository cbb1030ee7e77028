"""
Wedding Gallery Backend — Media Route Handlers
================================================

What:  POST /upload (store one image in an event folder) and
       GET /images/{event} (list an event's image URLs).
How:   Extracts the file and event context, delegates to the MediaGateway,
       returns JSON. Gateway failures surface as exceptions and are
       formatted by the global handlers in main.py.
Who:   Called by the frontend gallery upload and gallery view.

Request Flow (upload):
    1. Client sends multipart/form-data with a 'file' field, ?event=<E>
    2. No file part (absent or plain text) → 400 {"error": "No file uploaded"}
    3. Content is read into memory and handed to the gateway
    4. Gateway failure → UploadFailedError → 500
    5. Success → 200 with the UploadedImage body
"""

import logging
from typing import Union

from fastapi import APIRouter, Depends, File, UploadFile
from starlette.datastructures import UploadFile as StarletteUploadFile

from wedding_api.dependencies import get_media_gateway, path_event, upload_event
from wedding_api.exceptions import NoFileProvidedError
from wedding_api.schemas.common import ErrorResponse
from wedding_api.schemas.media import EventContext, ImageListResponse, UploadedImage
from wedding_api.services.media_base import MediaGateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Media"])


@router.post(
    "/upload",
    response_model=UploadedImage,
    responses={
        200: {"description": "Image stored", "model": UploadedImage},
        400: {"description": "No file uploaded", "model": ErrorResponse},
        500: {"description": "Media host failed", "model": ErrorResponse},
    },
    summary="Upload an image into an event folder",
    description=(
        "Stores the uploaded image under wedding/private/<event>, using the "
        "original filename without its extension as the public identifier."
    ),
)
async def upload_image(
    # A plain text "file" field counts as no file
    file: Union[UploadFile, str, None] = File(
        default=None,
        description="Image file to store",
    ),
    context: EventContext = Depends(upload_event),
    gateway: MediaGateway = Depends(get_media_gateway),
) -> UploadedImage:
    if not isinstance(file, StarletteUploadFile):
        raise NoFileProvidedError(context={"field_type": type(file).__name__})

    try:
        content = await file.read()
        logger.info(
            "Received upload: filename=%s, size=%d bytes, event=%s",
            file.filename or "unknown",
            len(content),
            context.event,
        )
        return await gateway.store_image(
            event=context.event,
            filename=file.filename,
            content=content,
            content_type=file.content_type,
        )
    finally:
        await file.close()


@router.get(
    "/images/{event}",
    response_model=ImageListResponse,
    responses={
        200: {"description": "Image URLs, newest first (max 30)", "model": ImageListResponse},
        500: {"description": "Media host search failed", "model": ErrorResponse},
    },
    summary="List images for an event",
)
async def list_images(
    context: EventContext = Depends(path_event),
    gateway: MediaGateway = Depends(get_media_gateway),
) -> ImageListResponse:
    urls = await gateway.list_images(context.event)
    return ImageListResponse(images=urls)
