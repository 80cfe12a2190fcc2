"""Baseline schema — ledger metadata, prices, bills, event WAL.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-10-17

Fresh databases created by ``kycpay init`` are stamped at this revision
without running it.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "ledger_meta",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("owner", sa.Text, nullable=False),
        sa.Column("address", sa.Text, nullable=False, unique=True),
        sa.Column("created", sa.Text, nullable=False),
    )

    op.create_table(
        "prices",
        sa.Column("slot", sa.Integer, primary_key=True),
        sa.Column("amount", sa.Text, nullable=False),
        sa.Column("modified", sa.Text, nullable=False),
    )

    op.create_table(
        "bills",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("payer", sa.Text, nullable=False),
        sa.Column("label", sa.Text, nullable=False),
        sa.Column("amount", sa.Text, nullable=False),
        sa.Column("status", sa.Text, nullable=False, server_default="open"),
        sa.Column("paid_amount", sa.Text),
        sa.Column("paid_at", sa.Text),
        sa.Column("created", sa.Text, nullable=False),
        sa.Column("modified", sa.Text, nullable=False),
        sa.UniqueConstraint("payer", "label"),
    )
    op.create_index("ix_bills_payer", "bills", ["payer"])
    op.create_index("ix_bills_status", "bills", ["status"])

    op.create_table(
        "event_wal",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("hook_name", sa.Text, nullable=False),
        sa.Column("payload", sa.Text, nullable=False),
        sa.Column("status", sa.Text, nullable=False),
        sa.Column("error", sa.Text),
        sa.Column("retries", sa.Integer, server_default="0"),
        sa.Column("created", sa.Text, nullable=False),
        sa.Column("completed", sa.Text),
    )
    op.create_index("ix_event_wal_hook", "event_wal", ["hook_name"])


def downgrade() -> None:
    op.drop_index("ix_event_wal_hook", "event_wal")
    op.drop_table("event_wal")
    op.drop_index("ix_bills_status", "bills")
    op.drop_index("ix_bills_payer", "bills")
    op.drop_table("bills")
    op.drop_table("prices")
    op.drop_table("ledger_meta")
