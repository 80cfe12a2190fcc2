"""Tests for the Ledger repository and its transactions."""

from __future__ import annotations

import pytest

from kycpay.config.settings import KycSettings
from kycpay.infrastructure.ledger import Ledger
from kycpay.infrastructure.token import SqlTokenLedger
from kycpay.plugins.event_bus import EventBus

PAYER = "0x" + "ab" * 20
NOW = "2024-01-01T00:00:00+00:00"


class TestConstruction:
    def test_creates_state_layout(self, ledger: Ledger) -> None:
        state = ledger.root / ".kycpay"
        assert (state / "kycpay.db").is_file()
        assert (state / "token.db").is_file()
        assert (state / "backups").is_dir()

    def test_default_token_uses_settings(self, ledger: Ledger) -> None:
        assert isinstance(ledger.token, SqlTokenLedger)
        assert ledger.token.symbol == "USDT"
        assert ledger.token.decimals == 18

    def test_injected_token(self, settings: KycSettings, tmp_path) -> None:
        token = SqlTokenLedger.open(tmp_path / "other.db", symbol="XYZ")
        led = Ledger(settings, token=token)
        try:
            assert led.token is token
        finally:
            led.close()
            token.close()

    def test_event_bus_lazy(self, settings: KycSettings) -> None:
        led = Ledger(settings)
        try:
            assert led.event_bus is None
            led.init_event_bus(sync=True)
            assert isinstance(led.event_bus, EventBus)
        finally:
            led.close()

    def test_audit_plugin_registered(self, ledger: Ledger) -> None:
        assert ledger.event_bus is not None
        assert "audit-builtin" in ledger.event_bus.plugin_manager.list_plugin_names()


class TestTransactions:
    def test_meta_absent_before_init(self, ledger: Ledger) -> None:
        with ledger.transaction() as txn:
            assert txn.get_meta() is None

    def test_prices_upsert(self, ledger: Ledger) -> None:
        with ledger.transaction() as txn:
            txn.set_price(0, 10, NOW)
            txn.set_price(0, 2**80, NOW)
            txn.set_price(1, 20, NOW)
        with ledger.transaction() as txn:
            assert txn.get_price(0) == 2**80
            assert txn.list_prices() == [(0, 2**80), (1, 20)]
            assert txn.get_price(5) is None

    def test_bill_roundtrip(self, ledger: Ledger) -> None:
        with ledger.transaction() as txn:
            txn.insert_bill(PAYER, "bill1", 50, NOW)
        with ledger.transaction() as txn:
            bill = txn.get_bill(PAYER, "bill1")
        assert bill is not None
        assert bill.amount == 50
        assert bill.status == "open"
        assert bill.paid_amount is None

    def test_labels_exact_match(self, ledger: Ledger) -> None:
        with ledger.transaction() as txn:
            txn.insert_bill(PAYER, "bill1", 50, NOW)
            assert txn.get_bill(PAYER, "Bill1") is None
            assert txn.get_bill(PAYER, "bill1 ") is None

    def test_update_bill(self, ledger: Ledger) -> None:
        with ledger.transaction() as txn:
            txn.insert_bill(PAYER, "bill1", 50, NOW)
            txn.update_bill(PAYER, "bill1", amount=0, status="paid", paid_amount=50, paid_at=NOW)
            bill = txn.get_bill(PAYER, "bill1")
        assert bill is not None
        assert (bill.amount, bill.status, bill.paid_amount) == (0, "paid", 50)

    def test_rollback_on_exception(self, ledger: Ledger) -> None:
        with pytest.raises(RuntimeError):
            with ledger.transaction() as txn:
                txn.insert_bill(PAYER, "bill1", 50, NOW)
                raise RuntimeError("boom")
        with ledger.transaction() as txn:
            assert txn.get_bill(PAYER, "bill1") is None

    def test_list_bills_filters(self, ledger: Ledger) -> None:
        other = "0x" + "cd" * 20
        with ledger.transaction() as txn:
            txn.insert_bill(PAYER, "b", 1, NOW)
            txn.insert_bill(PAYER, "a", 2, NOW)
            txn.insert_bill(other, "a", 3, NOW)
            txn.update_bill(other, "a", status="paid")
        with ledger.transaction() as txn:
            assert [b.label for b in txn.list_bills(payer=PAYER)] == ["a", "b"]
            assert [b.payer for b in txn.list_bills(status="paid")] == [other]
            assert len(txn.list_bills()) == 3
