"""SQLite database engine and schema via SQLAlchemy Core."""

from kycpay.infrastructure.database.engine import create_db_engine, db_path, init_database
from kycpay.infrastructure.database.schema import bills, event_wal, ledger_meta, metadata, prices

__all__ = [
    "bills",
    "create_db_engine",
    "db_path",
    "event_wal",
    "init_database",
    "ledger_meta",
    "metadata",
    "prices",
]
