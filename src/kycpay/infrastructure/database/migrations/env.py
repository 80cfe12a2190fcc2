"""Alembic environment for the kycpay ledger database.

Migrations run on an engine from :func:`create_db_engine`, so they see the
same WAL journal and foreign-key pragmas as the ledger itself.
Autogenerated operations render in batch mode: SQLite cannot alter most
column definitions in place.
"""

from __future__ import annotations

from pathlib import Path

from alembic import context
from sqlalchemy.engine import make_url

from kycpay.infrastructure.database.engine import create_db_engine
from kycpay.infrastructure.database.schema import metadata

target_metadata = metadata


def _ledger_db() -> Path:
    url = context.config.get_main_option("sqlalchemy.url")
    assert url is not None, "sqlalchemy.url must be set in Alembic config"
    database = make_url(url).database
    assert database, f"Not a file-backed ledger database: {url}"
    return Path(database)


def run_migrations_offline() -> None:
    """Emit the migration SQL for a ledger database to stdout."""
    context.configure(
        url=context.config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        render_as_batch=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Migrate the ledger database in place."""
    engine = create_db_engine(_ledger_db())
    try:
        with engine.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                render_as_batch=True,
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
