"""TreasuryService — owner-only view and withdrawal of collected tokens."""

from __future__ import annotations

from kycpay.domain.identity import is_zero_address
from kycpay.domain.types import Capability, ErrorCode
from kycpay.infrastructure.token import TokenLedgerError
from kycpay.services._helpers import try_normalize
from kycpay.services.base import BaseService
from kycpay.services.result import ServiceResult
from kycpay.services.telemetry import traced


class TreasuryService(BaseService):
    """Balance of the ledger address on the token ledger, and its withdrawal."""

    @traced
    def read_balance(self, caller: str) -> ServiceResult:
        op = "read_balance"
        with self._ledger.transaction() as txn:
            gate = self._guard(txn, op, Capability.OWNER_ONLY, caller)
            if gate.denied is not None:
                return gate.denied
            assert gate.meta is not None
            balance = txn.token.balance_of(gate.meta.address)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "address": gate.meta.address,
                "balance": balance,
                "symbol": self._ledger.token.symbol,
            },
        )

    @traced
    def withdraw_balance(self, caller: str, destination: str) -> ServiceResult:
        """Move the whole ledger balance to *destination* (owner only)."""
        op = "withdraw_balance"
        warnings: list[str] = []

        with self._ledger.transaction() as txn:
            gate = self._guard(txn, op, Capability.OWNER_ONLY, caller)
            if gate.denied is not None:
                return gate.denied
            assert gate.meta is not None

            if is_zero_address(destination):
                return ServiceResult.failure(
                    op, ErrorCode.ZERO_ADDRESS, "Address can't be zero!"
                )
            resolved = try_normalize(destination)
            if resolved is None:
                return ServiceResult.failure(
                    op,
                    ErrorCode.INVALID_ADDRESS,
                    f"Not a valid destination address: {destination!r}",
                )

            amount = txn.token.balance_of(gate.meta.address)
            try:
                accepted = txn.token.transfer(gate.meta.address, resolved, amount)
            except TokenLedgerError as exc:
                return ServiceResult.failure(
                    op, ErrorCode.TRANSFER_FAILED, f"Token transfer failed: {exc.reason}"
                )
            if not accepted:
                return ServiceResult.failure(
                    op, ErrorCode.TRANSFER_FAILED, "Token transfer was rejected"
                )

        if amount == 0:
            warnings.append("Ledger balance was already zero")

        self._dispatch_event(
            "balance_withdrawn",
            {"destination": resolved, "amount": amount},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"destination": resolved, "amount": amount, "symbol": self._ledger.token.symbol},
            warnings=warnings,
        )
