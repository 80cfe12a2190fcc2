"""Tests for PriceService — the two-slot price table."""

from __future__ import annotations

import json

from sqlalchemy import select

from kycpay.infrastructure.database.schema import event_wal
from kycpay.infrastructure.ledger import Ledger
from kycpay.services.prices import PriceService


class TestGetPrice:
    def test_reads_slots(self, ready_ledger: Ledger) -> None:
        result = PriceService(ready_ledger).get_price(1)
        assert result.ok
        assert result.data == {"index": 1, "amount": 20}

    def test_out_of_range(self, ready_ledger: Ledger) -> None:
        result = PriceService(ready_ledger).get_price(2)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INDEX_OUT_OF_RANGE"

    def test_not_initialized(self, ledger: Ledger) -> None:
        result = PriceService(ledger).get_price(0)
        assert result.error is not None
        assert result.error.code == "NOT_INITIALIZED"

    def test_list(self, ready_ledger: Ledger) -> None:
        result = PriceService(ready_ledger).list_prices()
        assert result.data["count"] == 2
        assert [i["amount"] for i in result.data["items"]] == [10, 20]


class TestSetPrice:
    def test_owner_sets(self, ready_ledger: Ledger, owner: str) -> None:
        svc = PriceService(ready_ledger)
        result = svc.set_price(owner, 0, 12)
        assert result.ok
        assert result.data == {"index": 0, "amount": 12, "previous": 10}
        assert svc.get_price(0).data["amount"] == 12

    def test_non_owner(self, ready_ledger: Ledger, addr1: str) -> None:
        svc = PriceService(ready_ledger)
        result = svc.set_price(addr1, 0, 12)
        assert result.error is not None
        assert result.error.code == "UNAUTHORIZED"
        assert result.error.message == "Not authorized!"
        assert svc.get_price(0).data["amount"] == 10

    def test_zero_rejected(self, ready_ledger: Ledger, owner: str) -> None:
        result = PriceService(ready_ledger).set_price(owner, 0, 0)
        assert result.error is not None
        assert result.error.code == "INVALID_AMOUNT"
        assert result.error.message == "New price can't be zero!"

    def test_out_of_range(self, ready_ledger: Ledger, owner: str) -> None:
        result = PriceService(ready_ledger).set_price(owner, 2, 5)
        assert result.error is not None
        assert result.error.code == "INDEX_OUT_OF_RANGE"

    def test_gate_before_validation(self, ready_ledger: Ledger, addr1: str) -> None:
        result = PriceService(ready_ledger).set_price(addr1, 7, 0)
        assert result.error is not None
        assert result.error.code == "UNAUTHORIZED"

    def test_emits_price_changed(self, ready_ledger: Ledger, owner: str) -> None:
        PriceService(ready_ledger).set_price(owner, 1, 25)
        PriceService(ready_ledger).set_price(owner, 1, 25)
        with ready_ledger.engine.connect() as conn:
            rows = conn.execute(
                select(event_wal.c.payload).where(event_wal.c.hook_name == "price_changed")
            ).fetchall()
        assert [json.loads(r.payload) for r in rows] == [
            {"index": 1, "old_amount": 20, "new_amount": 25}
        ]
