"""Shared pytest fixtures for kycpay tests."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from kycpay.config.settings import KycSettings
from kycpay.infrastructure.database.engine import init_database
from kycpay.infrastructure.ledger import Ledger

# Well-known development accounts, stored lowercase like every identity.
OWNER = "0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266"
ADDR1 = "0x70997970c51812dc3a010c7d01b50e0d17dc79c8"
ADDR2 = "0x3c44cdddb6a900fa2b585dd299e03d12fa4293bc"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ``KYCPAY_*`` variables from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("KYCPAY_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def owner() -> str:
    return OWNER


@pytest.fixture
def addr1() -> str:
    return ADDR1


@pytest.fixture
def addr2() -> str:
    return ADDR2


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def settings(tmp_path: Path) -> KycSettings:
    """Settings rooted at a temp directory with synchronous event dispatch."""
    return KycSettings.from_cli(ledger_root=tmp_path, sync=True)


@pytest.fixture
def ledger(settings: KycSettings) -> Iterator[Ledger]:
    """Uninitialized ledger (no owner yet) with a synchronous event bus."""
    led = Ledger(settings)
    led.init_event_bus(sync=True)
    try:
        yield led
    finally:
        led.close()


@pytest.fixture
def ready_ledger(ledger: Ledger) -> Ledger:
    """Ledger initialized by OWNER with prices {10, 20} (base units)."""
    from kycpay.services.init import InitService

    result = InitService(ledger).init_ledger(OWNER, (10, 20))
    assert result.ok, result.error
    return ledger


@pytest.fixture
def fund(ready_ledger: Ledger) -> Callable[..., None]:
    """Mint tokens to an account and approve the ledger address to pull them.

    ``fund(account, minted, approved=None)``; *approved* defaults to *minted*.
    """

    def _fund(account: str, minted: int, approved: int | None = None) -> None:
        from kycpay.services.tokens import TokenService

        svc = TokenService(ready_ledger)
        if minted:
            assert svc.mint(account, minted).ok
        allowance = minted if approved is None else approved
        assert svc.approve(account, allowance).ok

    return _fund


@pytest.fixture
def _isolated_ledger(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated ledger.

    Use via ``@pytest.mark.usefixtures("_isolated_ledger")`` on command test
    classes. Base units are used on the command line (``decimals = 0``).
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("KYCPAY_LEDGER__DECIMALS", "0")
    monkeypatch.setenv("KYCPAY_EVENTS__SYNC", "true")


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Iterator[None]:
    """``--verbose`` CLI runs switch telemetry on process-wide; switch it back off."""
    yield
    from kycpay.services.telemetry import disable_telemetry

    disable_telemetry()
