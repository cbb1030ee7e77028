"""
Wedding Gallery Backend — Abstract Blessing Store Interface
=============================================================

What:  Abstract base class defining the contract for blessing persistence.
How:   Concrete stores inherit from BlessingStore and implement append() and
       list_all(). `build_blessing_store()` picks one from settings.
Who:   Called by BlessingService; built once per app by `create_app()`.

Implementations:
    - InMemoryBlessingStore: volatile list, lives as long as the process
    - DatabaseBlessingStore: durable table behind async SQLAlchemy
"""

from abc import ABC, abstractmethod
from typing import List

from wedding_api.config import Settings
from wedding_api.schemas.blessing import BlessingResponse


class BlessingStore(ABC):
    """
    Abstract interface for storing and listing blessings.

    Contract:
        - append() assigns the timestamp (and id) server-side and returns
          the stored value
        - list_all() returns every blessing, newest first; equal timestamps
          keep insertion order as tie-break (later insert first)
        - list_all() returns a fully materialized list, never a stream
        - Durable implementations wrap backend failures in
          StoreUnavailableError
    """

    #: Backend name reported by the health endpoint
    backend: str = "unknown"

    @abstractmethod
    async def append(self, name: str, message: str) -> BlessingResponse:
        """
        Persist a new blessing and return it.

        Args:
            name: Guest name, already trimmed and non-empty.
            message: Blessing text, already trimmed and non-empty.

        Raises:
            StoreUnavailableError: The durable store could not be written.
        """
        ...

    @abstractmethod
    async def list_all(self) -> List[BlessingResponse]:
        """
        Return all blessings ordered newest first.

        Raises:
            StoreUnavailableError: The durable store could not be read.
        """
        ...

    async def startup(self) -> None:
        """Acquire resources. Called once from the app lifespan."""

    async def close(self) -> None:
        """Release resources. Called once from the app lifespan."""

    async def health_check(self) -> bool:
        return True


def build_blessing_store(settings: Settings) -> BlessingStore:
    """
    Build the store named by BLESSING_STORE.

    Imports are local so a memory-only deployment never loads the
    database driver.
    """
    if settings.blessing_store == "database":
        from wedding_api.services.database_store import DatabaseBlessingStore
        return DatabaseBlessingStore.from_settings(settings)

    from wedding_api.services.memory_store import InMemoryBlessingStore
    return InMemoryBlessingStore()
