"""Tests for the Alembic migrations."""

from __future__ import annotations

from pathlib import Path

from alembic import command
from sqlalchemy import create_engine, inspect

from kycpay.infrastructure.database.engine import db_path, state_dir
from kycpay.infrastructure.database.migrations import BASELINE_REVISION, build_config, stamp_head


def test_baseline_upgrade_creates_schema(tmp_path: Path) -> None:
    state_dir(tmp_path).mkdir()
    url = f"sqlite:///{db_path(tmp_path)}"
    command.upgrade(build_config(url), "head")

    engine = create_engine(url)
    try:
        names = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
    assert {"ledger_meta", "prices", "bills", "event_wal", "alembic_version"} <= names


def test_baseline_downgrade(tmp_path: Path) -> None:
    state_dir(tmp_path).mkdir()
    url = f"sqlite:///{db_path(tmp_path)}"
    cfg = build_config(url)
    command.upgrade(cfg, "head")
    command.downgrade(cfg, "base")

    engine = create_engine(url)
    try:
        names = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
    assert "bills" not in names


def test_stamp_head(tmp_path: Path, db_engine) -> None:
    stamp_head(tmp_path)
    with db_engine.connect() as conn:
        version = conn.exec_driver_sql("SELECT version_num FROM alembic_version").scalar()
    assert version == "002_wal_payer"


def _wal_shape(url: str) -> tuple[set[str], set[str]]:
    engine = create_engine(url)
    try:
        insp = inspect(engine)
        columns = {c["name"] for c in insp.get_columns("event_wal")}
        indexes = {i["name"] for i in insp.get_indexes("event_wal")}
    finally:
        engine.dispose()
    return columns, indexes


def test_wal_payer_upgrade_adds_indexed_column(tmp_path: Path) -> None:
    state_dir(tmp_path).mkdir()
    url = f"sqlite:///{db_path(tmp_path)}"
    command.upgrade(build_config(url), "head")

    columns, indexes = _wal_shape(url)
    assert "payer" in columns
    assert {"ix_event_wal_hook", "ix_event_wal_payer"} <= indexes


def test_wal_payer_downgrade_to_baseline(tmp_path: Path) -> None:
    state_dir(tmp_path).mkdir()
    url = f"sqlite:///{db_path(tmp_path)}"
    cfg = build_config(url)
    command.upgrade(cfg, "head")
    command.downgrade(cfg, BASELINE_REVISION)

    columns, indexes = _wal_shape(url)
    assert "payer" not in columns
    assert "ix_event_wal_payer" not in indexes
    assert "ix_event_wal_hook" in indexes
