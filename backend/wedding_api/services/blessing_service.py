"""
Wedding Gallery Backend — Blessing Service
============================================

What:  Presence validation for new blessings, then delegation to the store.
Who:   Called by the /api/blessings route handlers.

Validation Rules:
    - name and message must both be present and non-empty after trimming
    - values are stored trimmed
    - nothing else (length, profanity, duplicates) is checked

A rejected blessing never reaches the store, so a 400 leaves the stored
collection unchanged.
"""

import logging
from typing import List, Optional

from wedding_api.exceptions import ValidationError
from wedding_api.schemas.blessing import BlessingResponse
from wedding_api.services.blessing_store import BlessingStore

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Name and message are required"


class BlessingService:
    """
    Business logic for blessings.

    Stateless apart from the injected store: one instance per app, built
    by `create_app()` and handed to routes through `get_blessing_service`.
    """

    def __init__(self, store: BlessingStore):
        self.store = store

    async def create_blessing(
        self,
        name: Optional[str],
        message: Optional[str],
    ) -> BlessingResponse:
        """
        Validate and persist a blessing.

        Raises:
            ValidationError: name or message missing/blank (→ 400)
            StoreUnavailableError: durable store write failed (→ 500)
        """
        clean_name = (name or "").strip()
        clean_message = (message or "").strip()

        if not clean_name or not clean_message:
            missing = [
                field
                for field, value in (("name", clean_name), ("message", clean_message))
                if not value
            ]
            raise ValidationError(
                message=MISSING_FIELDS_MESSAGE,
                context={"missing": missing},
            )

        return await self.store.append(clean_name, clean_message)

    async def list_blessings(self) -> List[BlessingResponse]:
        """All blessings, newest first."""
        return await self.store.list_all()
