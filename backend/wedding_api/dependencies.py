"""
Wedding Gallery Backend — FastAPI Dependencies
================================================

What:  Accessors for the per-app collaborators and the event request context.
How:   `create_app()` stores settings, the BlessingService and the
       MediaGateway on `app.state`; these functions read them back for
       `Depends(...)`. Tests swap collaborators by passing their own to
       `create_app()`, never by patching module globals.

Event identifier sources:
    POST /upload?event=<E>   → upload_event()  (query string, optional)
    GET  /images/<E>         → path_event()    (path segment)
    Both yield an EventContext with the same normalization and default.
"""

from typing import Optional

from fastapi import Query, Request

from wedding_api.config import Settings
from wedding_api.schemas.media import EventContext
from wedding_api.services.blessing_service import BlessingService
from wedding_api.services.media_base import MediaGateway


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_blessing_service(request: Request) -> BlessingService:
    return request.app.state.blessing_service


def get_media_gateway(request: Request) -> MediaGateway:
    return request.app.state.media_gateway


def upload_event(
    request: Request,
    event: Optional[str] = Query(
        default=None,
        description="Event folder for the upload. Defaults to 'Uncategorized'.",
    ),
) -> EventContext:
    return EventContext.from_raw(event, get_app_settings(request).default_event)


def path_event(request: Request, event: str) -> EventContext:
    return EventContext.from_raw(event, get_app_settings(request).default_event)
