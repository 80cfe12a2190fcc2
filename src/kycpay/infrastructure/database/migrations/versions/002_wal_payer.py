"""Index settlement events by payer.

Revision ID: 002_wal_payer
Revises: 001_baseline
Create Date: 2026-10-17
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "002_wal_payer"
down_revision: str | None = "001_baseline"
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.add_column("event_wal", sa.Column("payer", sa.Text(), nullable=True))
    op.create_index("ix_event_wal_payer", "event_wal", ["hook_name", "payer"])

    op.execute(
        """
        UPDATE event_wal
        SET payer = json_extract(payload, '$.payer')
        WHERE payer IS NULL
        """
    )


def downgrade() -> None:
    op.drop_index("ix_event_wal_payer", "event_wal")
    with op.batch_alter_table("event_wal") as batch:
        batch.drop_column("payer")
