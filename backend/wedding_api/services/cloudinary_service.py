"""
Wedding Gallery Backend — Cloudinary Media Gateway
====================================================

What:  MediaGateway implementation on top of the Cloudinary Python SDK.
How:   Uploads with `cloudinary.uploader.upload`, lists with the Search API,
       probes with `cloudinary.api.ping`. Credentials are passed on every
       call rather than through the SDK's global `cloudinary.config()`, so
       several gateways (and tests) never see each other's configuration.
Who:   Built once per app by `create_app()`.

Concurrency:
    The SDK is synchronous (urllib3 underneath). Every call runs through
    FastAPI's `run_in_threadpool` so a slow upload does not block the event
    loop. No timeout or retry is applied beyond the SDK defaults.

Search expression:
    folder:"wedding/private/<event>"   sort_by created_at desc   max_results 30
"""

import io
import logging
from typing import Any, Dict, List, Optional

import cloudinary.api
import cloudinary.uploader
from cloudinary.search import Search
from fastapi.concurrency import run_in_threadpool

from wedding_api.config import Settings
from wedding_api.exceptions import FetchFailedError, NoFileProvidedError, UploadFailedError
from wedding_api.schemas.media import UploadedImage
from wedding_api.services.media_base import (
    DEFAULT_EVENT,
    DEFAULT_ROOT_FOLDER,
    MAX_LISTED_IMAGES,
    MediaGateway,
    public_id_from_filename,
)

logger = logging.getLogger(__name__)


def _quote(value: str) -> str:
    """Quote a value for a Cloudinary search expression."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class CloudinaryMediaGateway(MediaGateway):
    """
    Stores event photos on Cloudinary and lists them back.

    Args:
        cloud_name / api_key / api_secret: Cloudinary account credentials.
        root_folder: Parent folder for event folders.
        default_event: Folder used when no event is given.
    """

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        root_folder: str = DEFAULT_ROOT_FOLDER,
        default_event: str = DEFAULT_EVENT,
    ):
        super().__init__(root_folder=root_folder, default_event=default_event)
        self._credentials: Dict[str, Any] = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
            "secure": True,
        }
        logger.info(
            "CloudinaryMediaGateway initialized for cloud=%s, root_folder=%s",
            cloud_name or "<unset>",
            root_folder,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "CloudinaryMediaGateway":
        return cls(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            root_folder=settings.media_root_folder,
            default_event=settings.default_event,
        )

    # ── Upload ────────────────────────────────────────────────────────────

    async def store_image(
        self,
        event: Optional[str],
        filename: Optional[str],
        content: Optional[bytes],
        content_type: Optional[str] = None,
    ) -> UploadedImage:
        if not content:
            raise NoFileProvidedError(context={"filename": filename})

        folder = self.folder_for(event)
        options: Dict[str, Any] = {
            "folder": folder,
            "resource_type": "image",
            "filename": filename or "upload",
            **self._credentials,
        }
        public_id = public_id_from_filename(filename)
        if public_id:
            options["public_id"] = public_id

        logger.info(
            "Uploading %s (%d bytes) to folder %s as %s",
            filename or "<unnamed>",
            len(content),
            folder,
            public_id or "<host-assigned>",
        )

        try:
            result = await run_in_threadpool(
                cloudinary.uploader.upload, io.BytesIO(content), **options
            )
        except Exception as e:
            logger.error("Cloudinary upload to %s failed: %s", folder, str(e), exc_info=True)
            raise UploadFailedError(
                context={"folder": folder, "filename": filename, "error_type": type(e).__name__},
            )

        return self._to_uploaded_image(result, folder, filename, content_type, len(content))

    @staticmethod
    def _to_uploaded_image(
        result: Dict[str, Any],
        folder: str,
        filename: Optional[str],
        content_type: Optional[str],
        size: int,
    ) -> UploadedImage:
        """Map the SDK's upload response onto our response model."""
        return UploadedImage(
            url=result.get("secure_url") or result.get("url") or "",
            public_id=result.get("public_id", ""),
            folder=result.get("asset_folder") or result.get("folder") or folder,
            original_filename=filename,
            content_type=content_type,
            size=result.get("bytes", size),
            format=result.get("format"),
            width=result.get("width"),
            height=result.get("height"),
            created_at=result.get("created_at"),
            metadata=dict(result),
        )

    # ── Listing ───────────────────────────────────────────────────────────

    def _search(self, folder: str) -> Dict[str, Any]:
        return (
            Search()
            .expression(f"folder:{_quote(folder)}")
            .sort_by("created_at", "desc")
            .max_results(MAX_LISTED_IMAGES)
            .execute(**self._credentials)
        )

    async def list_images(self, event: Optional[str]) -> List[str]:
        folder = self.folder_for(event)
        try:
            result = await run_in_threadpool(self._search, folder)
        except Exception as e:
            logger.error("[IMAGE FETCH ERROR] folder=%s: %s", folder, str(e), exc_info=True)
            raise FetchFailedError(
                context={"folder": folder, "error_type": type(e).__name__},
            )

        resources = result.get("resources") or []
        urls = [r["secure_url"] for r in resources if r.get("secure_url")]
        logger.debug("Listed %d images in %s", len(urls), folder)
        return urls[:MAX_LISTED_IMAGES]

    # ── Health ────────────────────────────────────────────────────────────

    async def health_check(self) -> bool:
        try:
            await run_in_threadpool(cloudinary.api.ping, **self._credentials)
            return True
        except Exception as e:
            logger.warning("Cloudinary health check failed: %s", str(e))
            return False
