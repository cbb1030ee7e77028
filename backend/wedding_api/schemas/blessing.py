"""
Wedding Gallery Backend — Blessing Schemas
==========================================

What:  Pydantic models defining the blessing API contract.
How:   FastAPI uses these models to parse request bodies, serialize responses,
       and generate the OpenAPI documentation.
Who:   Route handlers, BlessingService, and every BlessingStore.

Design Decision:
    BlessingCreate accepts missing fields (None) so the presence check lives
    in BlessingService and produces the API's own 400 body rather than
    FastAPI's field-level 422.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What the client sends
# ══════════════════════════════════════════════════════════════════════════


class BlessingCreate(BaseModel):
    """
    What:  Body of POST /api/blessings.

    Any `timestamp` sent by the client is ignored (extra keys are dropped);
    the server always assigns it.
    """
    name: Optional[str] = Field(default=None, description="Guest name")
    message: Optional[str] = Field(default=None, description="Blessing text")


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class BlessingResponse(BaseModel):
    """
    What:  A stored blessing.
    Who:   Returned by both blessing endpoints and by every BlessingStore.
    """
    id: Optional[int] = Field(default=None, description="Store-assigned identifier")
    name: str = Field(description="Guest name")
    message: str = Field(description="Blessing text")
    timestamp: datetime = Field(description="Server-assigned creation time (UTC ISO 8601)")

    model_config = {"from_attributes": True}

    @field_validator("timestamp")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """SQLite hands back naive datetimes; every stored value is UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)
