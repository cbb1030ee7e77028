"""Create blessings table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `blessings` table for the durable blessing store.
How:   Auto-increment integer key, TIMESTAMP WITH TIME ZONE defaulting to now,
       descending index on timestamp for the newest-first listing.

Rollback: downgrade() drops the table (all blessings lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the blessings table and its timestamp index."""
    op.create_table(
        "blessings",

        sa.Column(
            "id",
            sa.Integer(),
            autoincrement=True,
            nullable=False,
            comment="Store-assigned identifier; also the insertion order",
        ),

        sa.Column(
            "name",
            sa.String(255),
            nullable=False,
            comment="Name of the guest leaving the blessing",
        ),

        sa.Column(
            "message",
            sa.Text(),
            nullable=False,
            comment="Blessing text",
        ),

        sa.Column(
            "timestamp",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When the blessing was written (UTC)",
        ),

        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index(
        "idx_blessings_timestamp",
        "blessings",
        [sa.text("timestamp DESC")],
    )


def downgrade() -> None:
    """Drop the blessings table. Destructive."""
    op.drop_index("idx_blessings_timestamp", table_name="blessings")
    op.drop_table("blessings")
