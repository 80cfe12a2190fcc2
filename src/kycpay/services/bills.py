"""BillService — named per-payer bills keyed by (payer, label).

A (payer, label) pair is allocated for good once created: re-creating it
fails even after its amount was changed to zero or the bill was paid.
Labels are matched exactly; no case or whitespace folding.
"""

from __future__ import annotations

from kycpay.domain.billing import BillStatus, is_valid_label
from kycpay.domain.types import Capability, ErrorCode
from kycpay.services._helpers import now_iso, try_normalize
from kycpay.services.base import BaseService
from kycpay.services.result import ServiceResult
from kycpay.services.telemetry import traced


class BillService(BaseService):
    """Create, read, re-bill, and list bills."""

    @traced
    def create_bill(self, caller: str, payer: str, amount: int, label: str) -> ServiceResult:
        """Bill *payer* for *amount* under *label* (owner only)."""
        op = "create_bill"
        warnings: list[str] = []

        with self._ledger.transaction() as txn:
            gate = self._guard(txn, op, Capability.OWNER_ONLY, caller)
            if gate.denied is not None:
                return gate.denied

            resolved = try_normalize(payer)
            if resolved is None:
                return _bad_payer(op, payer)
            if not is_valid_label(label):
                return ServiceResult.failure(
                    op, ErrorCode.INVALID_LABEL, "Bill label can't be empty"
                )
            if amount < 0:
                return ServiceResult.failure(
                    op, ErrorCode.INVALID_AMOUNT, "Bill amount can't be negative", amount=amount
                )
            if txn.get_bill(resolved, label) is not None:
                return ServiceResult.failure(
                    op,
                    ErrorCode.BILL_ALREADY_EXISTS,
                    "Bill id is not available!",
                    payer=resolved,
                    label=label,
                )

            txn.insert_bill(resolved, label, amount, now_iso())
            bill = txn.get_bill(resolved, label)

        if amount == 0:
            warnings.append("Bill created with zero amount; it can't be paid until re-billed")

        self._dispatch_event(
            "bill_created",
            {"payer": resolved, "label": label, "amount": amount},
            warnings,
        )
        assert bill is not None
        return ServiceResult(ok=True, op=op, data=bill.to_dict(), warnings=warnings)

    @traced
    def get_billed_amount(self, caller: str, payer: str, label: str) -> ServiceResult:
        """Return the outstanding amount of (payer, label) to its payer or the owner."""
        op = "get_billed_amount"
        resolved = try_normalize(payer)

        with self._ledger.transaction() as txn:
            gate = self._guard(txn, op, Capability.BILL_PARTY_ONLY, caller, party=resolved)
            if gate.denied is not None:
                return gate.denied

            if resolved is None:
                return _bad_payer(op, payer)
            bill = txn.get_bill(resolved, label)
            if bill is None:
                return _not_found(op, resolved, label)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "payer": bill.payer,
                "label": bill.label,
                "amount": bill.amount,
                "status": bill.status,
            },
        )

    @traced
    def change_billed_amount(
        self,
        caller: str,
        payer: str,
        label: str,
        new_amount: int,
    ) -> ServiceResult:
        """Overwrite the amount of an existing bill (owner only).

        Re-billing a paid bill reopens it.
        """
        op = "change_billed_amount"
        warnings: list[str] = []

        with self._ledger.transaction() as txn:
            gate = self._guard(txn, op, Capability.OWNER_ONLY, caller)
            if gate.denied is not None:
                return gate.denied

            resolved = try_normalize(payer)
            if resolved is None:
                return _bad_payer(op, payer)
            if new_amount < 0:
                return ServiceResult.failure(
                    op,
                    ErrorCode.INVALID_AMOUNT,
                    "Bill amount can't be negative",
                    amount=new_amount,
                )
            bill = txn.get_bill(resolved, label)
            if bill is None:
                return _not_found(op, resolved, label)

            if bill.status == BillStatus.PAID:
                warnings.append(f"Bill {label!r} was paid; re-billing reopens it")

            txn.update_bill(
                resolved,
                label,
                amount=new_amount,
                status=str(BillStatus.OPEN),
                modified=now_iso(),
            )
            updated = txn.get_bill(resolved, label)

        self._dispatch_event(
            "bill_amount_changed",
            {
                "payer": resolved,
                "label": label,
                "old_amount": bill.amount,
                "new_amount": new_amount,
            },
            warnings,
        )
        assert updated is not None
        data = updated.to_dict()
        data["previous"] = bill.amount
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    @traced
    def list_bills(
        self,
        caller: str,
        *,
        payer: str | None = None,
        status: str | None = None,
    ) -> ServiceResult:
        """List bills: all of them for the owner, or one payer's to that payer."""
        op = "list_bills"
        resolved = try_normalize(payer) if payer is not None else None
        capability = Capability.OWNER_ONLY if payer is None else Capability.BILL_PARTY_ONLY

        with self._ledger.transaction() as txn:
            gate = self._guard(txn, op, capability, caller, party=resolved)
            if gate.denied is not None:
                return gate.denied

            if payer is not None and resolved is None:
                return _bad_payer(op, payer)
            rows = txn.list_bills(payer=resolved, status=status)

        items = [row.to_dict() for row in rows]
        return ServiceResult(ok=True, op=op, data={"count": len(items), "items": items})


def _bad_payer(op: str, payer: str) -> ServiceResult:
    return ServiceResult.failure(
        op, ErrorCode.INVALID_ADDRESS, f"Not a valid payer address: {payer!r}", payer=payer
    )


def _not_found(op: str, payer: str, label: str) -> ServiceResult:
    return ServiceResult.failure(
        op,
        ErrorCode.BILL_NOT_FOUND,
        f"No bill {label!r} for {payer}",
        payer=payer,
        label=label,
    )
