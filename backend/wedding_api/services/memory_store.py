"""
Wedding Gallery Backend — In-Memory Blessing Store
====================================================

What:  Volatile BlessingStore backed by a Python list.
When:  BLESSING_STORE=memory (the default) and in API tests.

Every blessing is lost when the process exits. Each instance owns its own
list; there is no module-level state, so two apps never share blessings.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import List

from wedding_api.schemas.blessing import BlessingResponse
from wedding_api.services.blessing_store import BlessingStore

logger = logging.getLogger(__name__)


class InMemoryBlessingStore(BlessingStore):
    """
    Keeps blessings in insertion order.

    Ids are the 1-based insertion sequence, so sorting by (timestamp, id)
    descending gives newest first with insertion order as the tie-break.
    Appends are serialized by an asyncio.Lock so each one is atomic and
    visible to every later read.
    """

    backend = "memory"

    def __init__(self) -> None:
        self._blessings: List[BlessingResponse] = []
        self._lock = asyncio.Lock()

    async def append(self, name: str, message: str) -> BlessingResponse:
        async with self._lock:
            blessing = BlessingResponse(
                id=len(self._blessings) + 1,
                name=name,
                message=message,
                timestamp=datetime.now(timezone.utc),
            )
            self._blessings.append(blessing)

        logger.info("Blessing %d stored in memory (from %s)", blessing.id, name)
        return blessing.model_copy()

    async def list_all(self) -> List[BlessingResponse]:
        ordered = sorted(
            self._blessings,
            key=lambda b: (b.timestamp, b.id),
            reverse=True,
        )
        return [b.model_copy() for b in ordered]

    def __len__(self) -> int:
        return len(self._blessings)
