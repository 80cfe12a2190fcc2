"""Database engine setup for SQLite with WAL mode.

The ledger DB is stored at {root}/.kycpay/kycpay.db. SQLAlchemy Core
(not ORM) is used because kycpay is a short-lived CLI process.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from kycpay.infrastructure.database.schema import metadata

STATE_DIR = ".kycpay"
DB_FILENAME = "kycpay.db"
TOKEN_DB_FILENAME = "token.db"


def state_dir(root: Path) -> Path:
    """The hidden state directory under *root*."""
    return root / STATE_DIR


def db_path(root: Path) -> Path:
    """Path of the ledger database under *root*."""
    return state_dir(root) / DB_FILENAME


def create_db_engine(path: Path) -> Engine:
    """Create a SQLite engine with WAL mode and foreign keys enabled."""
    engine = create_engine(f"sqlite:///{path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_database(root: Path) -> Engine:
    """Initialize the ledger database at ``{root}/.kycpay/kycpay.db``.

    Creates the ``.kycpay/`` directory structure and all tables from
    :data:`schema.metadata`. Idempotent, safe to call on an existing ledger.

    Returns the engine ready for use.
    """
    directory = state_dir(root)
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "backups").mkdir(exist_ok=True)

    engine = create_db_engine(db_path(root))
    metadata.create_all(engine)
    return engine
