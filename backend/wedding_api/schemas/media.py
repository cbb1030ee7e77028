"""
Wedding Gallery Backend — Media Schemas
=========================================

What:  Request context and response models for the image routes.
Who:   Upload/listing routes, their dependencies, and every MediaGateway.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class EventContext(BaseModel):
    """
    What:  Typed request context carrying the event identifier.
    Who:   Built by the `upload_event` (query string) and `path_event`
           (path segment) dependencies, so both routes see the same shape.

    The identifier is free-form: surrounding whitespace is stripped and an
    absent or blank value becomes the configured default ("Uncategorized").
    No other normalization is applied; callers sharing an identifier share
    a folder.
    """
    event: str = Field(min_length=1, description="Event identifier used as the folder name")

    @classmethod
    def from_raw(cls, raw: Optional[str], default: str) -> "EventContext":
        value = (raw or "").strip()
        return cls(event=value or default)


class UploadedImage(BaseModel):
    """
    What:  Result of POST /upload — what the media host reported back.

    `metadata` holds the raw upload response for clients that need fields
    not surfaced here (version, signature, etag, ...).
    """
    url: str = Field(description="Publicly accessible (HTTPS) URL of the image")
    public_id: str = Field(description="Media host identifier, folder included")
    folder: str = Field(description="Folder the image was stored under")
    original_filename: Optional[str] = Field(default=None)
    content_type: Optional[str] = Field(default=None)
    size: Optional[int] = Field(default=None, description="Stored size in bytes")
    format: Optional[str] = Field(default=None)
    width: Optional[int] = Field(default=None)
    height: Optional[int] = Field(default=None)
    created_at: Optional[datetime] = Field(default=None)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ImageListResponse(BaseModel):
    """
    What:  Result of GET /images/{event}.

    At most 30 URLs, newest first. An event with no images yields [].
    """
    images: List[str] = Field(default_factory=list)
