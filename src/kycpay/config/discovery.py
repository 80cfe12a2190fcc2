"""Ledger root and kycpay.toml discovery.

A ledger lives in the directory holding its ``.kycpay/`` state folder.
Commands run anywhere below that directory find it by walking up, the way
git finds ``.git/``. A ``kycpay.toml`` marks a ledger root too, and names
the ledger, its token and the default caller. ``KYCPAY_CONFIG`` or
``--config`` point at a config file outright.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from kycpay.config.models import KycConfig
from kycpay.infrastructure.database.engine import STATE_DIR

CONFIG_FILENAME = "kycpay.toml"
CONFIG_ENV_VAR = "KYCPAY_CONFIG"


def _walk_up(start: Path | None) -> Iterator[Path]:
    current = (start or Path.cwd()).resolve()
    yield current
    yield from current.parents


def find_config(start: Path | None = None) -> Path | None:
    """Locate the config file for a ledger at or above *start* (default: cwd).

    ``KYCPAY_CONFIG`` wins when set; a path that does not exist means no
    config rather than falling back to the walk.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    for directory in _walk_up(start):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def find_ledger_root(start: Path | None = None) -> Path | None:
    """Nearest directory at or above *start* holding ``.kycpay/`` or kycpay.toml."""
    for directory in _walk_up(start):
        if (directory / STATE_DIR).is_dir() or (directory / CONFIG_FILENAME).is_file():
            return directory
    return None


def read_config(path: Path) -> dict[str, Any]:
    """Parse a kycpay.toml and check it against :class:`KycConfig`.

    Returns the raw TOML table so settings sources keep the file sparse.
    Syntax and validation errors name the offending file.
    """
    try:
        data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc

    try:
        KycConfig.model_validate(data)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        msg = f"Invalid ledger config in {path}: {problems}"
        raise click.ClickException(msg) from exc
    return data
