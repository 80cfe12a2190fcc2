"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from kycpay.config.logging import configure_logging, ledger_context
from kycpay.config.models import LedgerConfig


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    kyc = logging.getLogger("kycpay")
    kyc_level = kyc.level
    yield
    structlog.contextvars.clear_contextvars()
    root.handlers = original_handlers
    root.setLevel(original_level)
    kyc.setLevel(kyc_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("kycpay").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("kycpay").level == logging.WARNING

    def test_quiets_libraries(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("alembic").level == logging.WARNING
        assert logging.getLogger("sqlalchemy").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("kycpay.test").warning("json test", answer=42)
        parsed = json.loads(capfd.readouterr().err.strip().splitlines()[-1])
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["logger"] == "kycpay.test"

    def test_lines_tagged_with_ledger(self, capfd: pytest.CaptureFixture[str]) -> None:
        caller = "0x" + "AB" * 20
        configure_logging(
            log_json=True, ledger=LedgerConfig(name="desk", symbol="DAI"), caller=caller
        )
        structlog.get_logger("kycpay.test").warning("settled")
        parsed = json.loads(capfd.readouterr().err.strip().splitlines()[-1])
        assert (parsed["ledger"], parsed["symbol"]) == ("desk", "DAI")
        assert parsed["caller"] == caller.lower()

    def test_stdlib_loggers_tagged(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True, ledger=LedgerConfig(name="desk"))
        logging.getLogger("kycpay.services.payments").warning("plain record")
        parsed = json.loads(capfd.readouterr().err.strip().splitlines()[-1])
        assert parsed["ledger"] == "desk"
        assert "caller" not in parsed

    def test_reconfigure_drops_previous_context(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True, ledger=LedgerConfig(name="desk"), caller="0x" + "11" * 20)
        configure_logging(log_json=True)
        structlog.get_logger("kycpay.test").warning("fresh")
        parsed = json.loads(capfd.readouterr().err.strip().splitlines()[-1])
        assert "ledger" not in parsed
        assert "caller" not in parsed

    def test_large_amounts_exact_in_json(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        amount = 25 * 10**18
        structlog.get_logger("kycpay.test").warning("pulled", amount=amount, kind=1)
        parsed = json.loads(capfd.readouterr().err.strip().splitlines()[-1])
        assert parsed["amount"] == str(amount)
        assert parsed["kind"] == 1


class TestLedgerContext:
    def test_without_caller(self) -> None:
        assert ledger_context(LedgerConfig()) == {"ledger": "kycpay", "symbol": "USDT"}

    def test_caller_lowercased(self) -> None:
        context = ledger_context(LedgerConfig(), "0x" + "CD" * 20)
        assert context["caller"] == "0x" + "cd" * 20
