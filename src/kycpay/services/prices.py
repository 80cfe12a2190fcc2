"""PriceService — the two-slot general offer price table."""

from __future__ import annotations

from kycpay.domain.billing import PRICE_SLOTS, is_valid_slot
from kycpay.domain.types import Capability, ErrorCode
from kycpay.services._helpers import now_iso
from kycpay.services.base import BaseService
from kycpay.services.result import ServiceResult
from kycpay.services.telemetry import traced


class PriceService(BaseService):
    """Reads and owner-only writes of the price table."""

    @traced
    def get_price(self, index: int) -> ServiceResult:
        """Return the price stored in slot *index*."""
        op = "get_price"
        with self._ledger.transaction() as txn:
            if txn.get_meta() is None:
                return ServiceResult.failure(
                    op, ErrorCode.NOT_INITIALIZED, "Ledger is not initialized"
                )
            if not is_valid_slot(index):
                return _out_of_range(op, index)
            amount = txn.get_price(index)

        return ServiceResult(ok=True, op=op, data={"index": index, "amount": amount or 0})

    @traced
    def list_prices(self) -> ServiceResult:
        """Return every slot with its price."""
        op = "list_prices"
        with self._ledger.transaction() as txn:
            if txn.get_meta() is None:
                return ServiceResult.failure(
                    op, ErrorCode.NOT_INITIALIZED, "Ledger is not initialized"
                )
            items = [{"index": slot, "amount": amount} for slot, amount in txn.list_prices()]

        return ServiceResult(ok=True, op=op, data={"count": len(items), "items": items})

    @traced
    def set_price(self, caller: str, index: int, amount: int) -> ServiceResult:
        """Overwrite slot *index* with *amount* (owner only, amount > 0)."""
        op = "set_price"
        warnings: list[str] = []

        with self._ledger.transaction() as txn:
            gate = self._guard(txn, op, Capability.OWNER_ONLY, caller)
            if gate.denied is not None:
                return gate.denied

            if amount <= 0:
                return ServiceResult.failure(
                    op, ErrorCode.INVALID_AMOUNT, "New price can't be zero!", amount=amount
                )
            if not is_valid_slot(index):
                return _out_of_range(op, index)

            previous = txn.get_price(index) or 0
            txn.set_price(index, amount, now_iso())

        if previous != amount:
            self._dispatch_event(
                "price_changed",
                {"index": index, "old_amount": previous, "new_amount": amount},
                warnings,
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={"index": index, "amount": amount, "previous": previous},
            warnings=warnings,
        )


def _out_of_range(op: str, index: int) -> ServiceResult:
    return ServiceResult.failure(
        op,
        ErrorCode.INDEX_OUT_OF_RANGE,
        f"Price slot {index} is out of range; expected one of {list(PRICE_SLOTS)}",
        index=index,
    )
