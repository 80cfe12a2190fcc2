"""SQLAlchemy Core table definitions for the kycpay database.

Amounts are stored as decimal TEXT (see :mod:`kycpay.domain.amounts`).
Timestamps are ISO 8601 TEXT.
"""

from __future__ import annotations

from sqlalchemy import Column, Index, Integer, MetaData, Table, Text, UniqueConstraint

metadata = MetaData()

# Single-row table: exactly one owner per ledger.
ledger_meta = Table(
    "ledger_meta",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", Text, nullable=False),
    Column("owner", Text, nullable=False),
    Column("address", Text, nullable=False, unique=True),
    Column("created", Text, nullable=False),
)

prices = Table(
    "prices",
    metadata,
    Column("slot", Integer, primary_key=True),
    Column("amount", Text, nullable=False),
    Column("modified", Text, nullable=False),
)

bills = Table(
    "bills",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("payer", Text, nullable=False),
    Column("label", Text, nullable=False),
    Column("amount", Text, nullable=False),
    Column("status", Text, nullable=False, default="open", server_default="open"),
    Column("paid_amount", Text),
    Column("paid_at", Text),
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
    UniqueConstraint("payer", "label"),
)

Index("ix_bills_payer", bills.c.payer)
Index("ix_bills_status", bills.c.status)

event_wal = Table(
    "event_wal",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("hook_name", Text, nullable=False),
    Column("payload", Text, nullable=False),  # JSON
    Column("status", Text, nullable=False),
    Column("error", Text),
    Column("retries", Integer, default=0, server_default="0"),
    Column("created", Text, nullable=False),
    Column("completed", Text),
    Column("payer", Text),  # copied from the payload for per-payer queries
)

Index("ix_event_wal_hook", event_wal.c.hook_name)
Index("ix_event_wal_payer", event_wal.c.hook_name, event_wal.c.payer)
