"""
Wedding Gallery Backend — Abstract Media Gateway Interface
============================================================

What:  Abstract base class for the media host (object storage + search),
       plus the folder/public-id naming rules every implementation shares.
How:   Concrete gateways inherit from MediaGateway and implement
       store_image(), list_images() and health_check().
Who:   Called by the /upload and /images routes; built by `create_app()`.

Naming Rules:
    folder     = <root>/<event>             e.g. wedding/private/ceremony
    public id  = filename up to its first "."  e.g. photo1.jpg → photo1

    Collisions (two files sharing a stem) and overwrite-on-duplicate are
    left entirely to the media host.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from wedding_api.schemas.media import UploadedImage

DEFAULT_ROOT_FOLDER = "wedding/private"
DEFAULT_EVENT = "Uncategorized"

#: Upper bound on URLs returned by list_images()
MAX_LISTED_IMAGES = 30


def event_folder(
    event: Optional[str],
    root: str = DEFAULT_ROOT_FOLDER,
    default_event: str = DEFAULT_EVENT,
) -> str:
    """Folder for an event; a missing event maps to the default folder."""
    return f"{root.rstrip('/')}/{event or default_event}"


def public_id_from_filename(filename: Optional[str]) -> Optional[str]:
    """
    Public identifier derived from the original filename.

    Everything before the first dot: "photo1.jpg" → "photo1",
    "IMG.2024.jpg" → "IMG". Returns None when nothing is left (".jpg", ""),
    letting the media host generate an identifier.
    """
    if not filename:
        return None
    stem = filename.split(".")[0].strip()
    return stem or None


class MediaGateway(ABC):
    """
    Abstract interface for storing and listing event images.

    Contract:
        - store_image() raises NoFileProvidedError BEFORE any remote call
          when the content is missing or empty
        - store_image() wraps every host failure in UploadFailedError
        - list_images() returns at most MAX_LISTED_IMAGES URLs, newest first
        - list_images() returns [] for an empty folder and wraps every host
          failure in FetchFailedError
    """

    def __init__(
        self,
        root_folder: str = DEFAULT_ROOT_FOLDER,
        default_event: str = DEFAULT_EVENT,
    ):
        self.root_folder = root_folder
        self.default_event = default_event

    def folder_for(self, event: Optional[str]) -> str:
        return event_folder(event, root=self.root_folder, default_event=self.default_event)

    @abstractmethod
    async def store_image(
        self,
        event: Optional[str],
        filename: Optional[str],
        content: Optional[bytes],
        content_type: Optional[str] = None,
    ) -> UploadedImage:
        """
        Upload an image into the event's folder.

        Raises:
            NoFileProvidedError: content is None or empty (no remote call)
            UploadFailedError: the media host rejected or errored
        """
        ...

    @abstractmethod
    async def list_images(self, event: Optional[str]) -> List[str]:
        """
        Public URLs of the event's images, newest first, capped at 30.

        Raises:
            FetchFailedError: the search call failed
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """True if the media host is reachable with the configured credentials."""
        ...
