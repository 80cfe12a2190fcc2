"""PaymentService — the settlement engine.

Pipeline for both entry points: VALIDATE → CHECK FUNDS → BOOK → PULL → EMIT

- VALIDATE: price slot (general) or payable bill (custom).
- CHECK FUNDS: allowance to the ledger address, then payer balance.
- BOOK: internal bookkeeping (custom payments mark the bill paid).
- PULL: ``transfer_from`` on the token ledger, the last action inside the
  transaction. A refusal raises and rolls back BOOK.
- EMIT: ``payment_completed`` after commit, exactly once per settlement.

The payer is always the caller; nobody settles on someone else's behalf.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kycpay.domain.billing import NONE_LABEL, BillStatus, is_payable, is_valid_slot
from kycpay.domain.types import Capability, ErrorCode, PaymentKind
from kycpay.infrastructure.token import TokenLedgerError
from kycpay.plugins.event_bus import SETTLEMENT_HOOK, settlement_records
from kycpay.services._helpers import now_iso, try_normalize
from kycpay.services.base import BaseService
from kycpay.services.result import ServiceResult
from kycpay.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from kycpay.infrastructure.ledger import LedgerTransaction

logger = logging.getLogger(__name__)


class _SettlementAborted(Exception):
    """Raised inside a transaction to roll it back with a failed result."""

    def __init__(self, result: ServiceResult) -> None:
        super().__init__(result.error.message if result.error else result.op)
        self.result = result


class PaymentService(BaseService):
    """General (price slot) and custom (named bill) payments."""

    @traced
    def general_payment(self, caller: str, price_index: int) -> ServiceResult:
        """Pay the fixed price in slot *price_index*."""
        op = "general_payment"

        try:
            with self._ledger.transaction() as txn:
                gate = self._guard(txn, op, Capability.OPEN, caller)
                if gate.denied is not None:
                    return gate.denied
                assert gate.meta is not None
                payer = gate.caller

                if not is_valid_slot(price_index):
                    return ServiceResult.failure(
                        op, ErrorCode.INVALID_OPTION, "Incorrect option!", index=price_index
                    )
                amount = txn.get_price(price_index) or 0

                shortfall = self._check_funds(txn, op, payer, gate.meta.address, amount)
                if shortfall is not None:
                    return shortfall

                self._pull(txn, op, payer, gate.meta.address, amount)
        except _SettlementAborted as aborted:
            return aborted.result

        return self._completed(op, payer, amount, PaymentKind(price_index), NONE_LABEL)

    @traced
    def custom_payment(self, caller: str, label: str) -> ServiceResult:
        """Pay the caller's open bill *label* in full and mark it paid."""
        op = "custom_payment"

        try:
            with self._ledger.transaction() as txn:
                gate = self._guard(txn, op, Capability.OPEN, caller)
                if gate.denied is not None:
                    return gate.denied
                assert gate.meta is not None
                payer = gate.caller

                bill = txn.get_bill(payer, label)
                if bill is None or not is_payable(bill.amount, bill.status):
                    return ServiceResult.failure(
                        op,
                        ErrorCode.INVALID_BILL,
                        "Invalid bill!",
                        payer=payer,
                        label=label,
                        status=bill.status if bill is not None else None,
                    )
                amount = bill.amount

                shortfall = self._check_funds(txn, op, payer, gate.meta.address, amount)
                if shortfall is not None:
                    return shortfall

                now = now_iso()
                txn.update_bill(
                    payer,
                    label,
                    amount=0,
                    status=str(BillStatus.PAID),
                    paid_amount=amount,
                    paid_at=now,
                    modified=now,
                )
                self._pull(txn, op, payer, gate.meta.address, amount)
        except _SettlementAborted as aborted:
            return aborted.result

        return self._completed(op, payer, amount, PaymentKind.CUSTOM, label)

    @traced
    def history(
        self,
        caller: str,
        *,
        payer: str | None = None,
        limit: int = 50,
    ) -> ServiceResult:
        """Settlement records, newest first.

        The owner sees every payer's records; anyone else sees only their own.
        Records are read back from the event WAL, so only settlements made
        with an event bus attached are listed.
        """
        op = "history"
        resolved = try_normalize(payer) if payer is not None else None
        party = resolved or try_normalize(caller)

        with self._ledger.transaction() as txn:
            gate = self._guard(txn, op, Capability.BILL_PARTY_ONLY, caller, party=party)
            if gate.denied is not None:
                return gate.denied
            assert gate.meta is not None

            if payer is not None and resolved is None:
                return ServiceResult.failure(
                    op, ErrorCode.INVALID_ADDRESS, f"Not a valid payer address: {payer!r}"
                )
            if limit < 1:
                return ServiceResult.failure(
                    op, ErrorCode.INVALID_LIMIT, f"Limit must be at least 1, got {limit}"
                )
            if resolved is None and gate.caller != gate.meta.owner:
                resolved = gate.caller

            items = settlement_records(txn.conn, payer=resolved, limit=limit)

        return ServiceResult(ok=True, op=op, data={"count": len(items), "items": items})

    # ------------------------------------------------------------------
    # Shared settlement tail
    # ------------------------------------------------------------------

    def _check_funds(
        self,
        txn: LedgerTransaction,
        op: str,
        payer: str,
        spender: str,
        amount: int,
    ) -> ServiceResult | None:
        """Allowance first, then balance. Returns a failed result or None."""
        with trace_span("check_funds"):
            allowance = txn.token.allowance(payer, spender)
            balance = txn.token.balance_of(payer)
        if allowance < amount:
            return ServiceResult.failure(
                op,
                ErrorCode.INSUFFICIENT_ALLOWANCE,
                "Not enough allowance, approve your tokens first!",
                required=amount,
                allowance=allowance,
                spender=spender,
            )
        if balance < amount:
            return ServiceResult.failure(
                op,
                ErrorCode.INSUFFICIENT_FUNDS,
                "Not enough tokens!",
                required=amount,
                balance=balance,
            )
        return None

    def _pull(
        self,
        txn: LedgerTransaction,
        op: str,
        payer: str,
        ledger_address: str,
        amount: int,
    ) -> None:
        """Pull *amount* from *payer* into the ledger address, or abort the transaction."""
        with trace_span("token.transfer_from") as span:
            try:
                accepted = txn.token.transfer_from(ledger_address, payer, ledger_address, amount)
            except TokenLedgerError as exc:
                raise _SettlementAborted(
                    ServiceResult.failure(
                        op,
                        ErrorCode.TRANSFER_FAILED,
                        f"Token transfer failed: {exc.reason}",
                        payer=payer,
                        amount=amount,
                    )
                ) from exc
            if span is not None:
                span.annotate("amount", amount)
        if not accepted:
            raise _SettlementAborted(
                ServiceResult.failure(
                    op,
                    ErrorCode.TRANSFER_FAILED,
                    "Token transfer was rejected",
                    payer=payer,
                    amount=amount,
                )
            )

    def _completed(
        self,
        op: str,
        payer: str,
        amount: int,
        kind: PaymentKind,
        label: str,
    ) -> ServiceResult:
        warnings: list[str] = []
        record = {"payer": payer, "amount": amount, "kind": int(kind), "label": label}
        logger.info("Payment completed: %s paid %d (kind=%d, label=%r)", payer, amount, kind, label)
        self._dispatch_event(SETTLEMENT_HOOK, record, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={**record, "kind_name": kind.name.lower()},
            warnings=warnings,
        )
