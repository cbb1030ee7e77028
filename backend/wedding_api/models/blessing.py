"""
Wedding Gallery Backend — Blessing SQLAlchemy Model
=====================================================

What:  ORM model representing the `blessings` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads it for migrations.
Who:   Used by DatabaseBlessingStore only. The in-memory store never touches it.

Table Design:
    - id: Auto-increment integer. Besides identifying the row it records
      insertion order, which breaks ties between equal timestamps.
    - name / message: Trimmed, non-empty text (enforced by BlessingService).
    - timestamp: UTC with timezone, assigned by the server at write time.

    Index on timestamp DESC serves the only read query:
    SELECT ... ORDER BY timestamp DESC, id DESC
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from wedding_api.database import Base


class Blessing(Base):
    """
    A named congratulatory message left by a guest.

    Lifecycle:
        Created by POST /api/blessings, never updated or deleted.
    """

    __tablename__ = "blessings"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Store-assigned identifier; also the insertion order",
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Name of the guest leaving the blessing",
    )

    message: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Blessing text",
    )

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        comment="When the blessing was written (UTC)",
    )

    __table_args__ = (
        Index("idx_blessings_timestamp", timestamp.desc()),
    )

    def __repr__(self) -> str:
        return f"<Blessing(id={self.id}, name='{self.name}', timestamp='{self.timestamp}')>"
