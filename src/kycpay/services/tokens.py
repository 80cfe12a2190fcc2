"""TokenService — sandbox access to the token ledger.

Lets the CLI drive a full payment locally: mint tokens to a payer, approve
the ledger address as spender, and inspect balances. These calls go to
the token ledger's own entry points; the ledger state is never touched.
"""

from __future__ import annotations

from kycpay.domain.types import ErrorCode
from kycpay.infrastructure.token import TokenLedgerError
from kycpay.services._helpers import try_normalize
from kycpay.services.base import BaseService
from kycpay.services.result import ServiceResult
from kycpay.services.telemetry import traced


class TokenService(BaseService):
    """Mint, approve, and query the token ledger."""

    def ledger_address(self) -> str | None:
        """The ledger's own address, or None before ``init``."""
        with self._ledger.transaction() as txn:
            meta = txn.get_meta()
        return meta.address if meta is not None else None

    @traced
    def mint(self, account: str, amount: int) -> ServiceResult:
        op = "mint"
        resolved = try_normalize(account)
        if resolved is None:
            return _bad_address(op, account)
        if amount <= 0:
            return ServiceResult.failure(
                op, ErrorCode.INVALID_AMOUNT, "Mint amount must be positive"
            )
        mint = getattr(self._ledger.token, "mint", None)
        if mint is None:
            return ServiceResult.failure(
                op,
                ErrorCode.UNSUPPORTED_OPERATION,
                "This token ledger does not support minting",
            )
        mint(resolved, amount)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "account": resolved,
                "amount": amount,
                "balance": self._ledger.token.balance_of(resolved),
            },
        )

    @traced
    def approve(self, owner: str, amount: int, *, spender: str | None = None) -> ServiceResult:
        """Approve *spender* (default: the ledger address) to pull *amount* from *owner*."""
        op = "approve"
        resolved_owner = try_normalize(owner)
        if resolved_owner is None:
            return _bad_address(op, owner)
        if spender is None:
            spender = self.ledger_address()
            if spender is None:
                return ServiceResult.failure(
                    op, ErrorCode.NOT_INITIALIZED, "Ledger is not initialized"
                )
        resolved_spender = try_normalize(spender)
        if resolved_spender is None:
            return _bad_address(op, spender)
        if amount < 0:
            return ServiceResult.failure(
                op, ErrorCode.INVALID_AMOUNT, "Allowance can't be negative"
            )
        try:
            self._ledger.token.approve(resolved_owner, resolved_spender, amount)
        except TokenLedgerError as exc:
            return ServiceResult.failure(op, ErrorCode.TRANSFER_FAILED, exc.reason)
        return ServiceResult(
            ok=True,
            op=op,
            data={"owner": resolved_owner, "spender": resolved_spender, "amount": amount},
        )

    @traced
    def balance_of(self, account: str) -> ServiceResult:
        op = "balance_of"
        resolved = try_normalize(account)
        if resolved is None:
            return _bad_address(op, account)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "account": resolved,
                "balance": self._ledger.token.balance_of(resolved),
                "symbol": self._ledger.token.symbol,
            },
        )

    @traced
    def allowance(self, owner: str, *, spender: str | None = None) -> ServiceResult:
        op = "allowance"
        resolved_owner = try_normalize(owner)
        if resolved_owner is None:
            return _bad_address(op, owner)
        if spender is None:
            spender = self.ledger_address()
            if spender is None:
                return ServiceResult.failure(
                    op, ErrorCode.NOT_INITIALIZED, "Ledger is not initialized"
                )
        resolved_spender = try_normalize(spender)
        if resolved_spender is None:
            return _bad_address(op, spender)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "owner": resolved_owner,
                "spender": resolved_spender,
                "allowance": self._ledger.token.allowance(resolved_owner, resolved_spender),
            },
        )


def _bad_address(op: str, value: str) -> ServiceResult:
    return ServiceResult.failure(
        op, ErrorCode.INVALID_ADDRESS, f"Not a valid address: {value!r}", address=value
    )
