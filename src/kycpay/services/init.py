"""InitService — one-time ledger construction.

Pipeline: VALIDATE → STORE → STAMP → RESPOND

Stores the owner, the derived ledger address, and the two initial prices
in one transaction, then stamps the Alembic head so later upgrades know
where this database starts.
"""

from __future__ import annotations

import logging

from kycpay.domain.billing import PRICE_SLOTS
from kycpay.domain.identity import derive_ledger_address, is_zero_address
from kycpay.domain.types import ErrorCode
from kycpay.infrastructure.database.migrations import stamp_head
from kycpay.services._helpers import now_iso, try_normalize
from kycpay.services.base import BaseService
from kycpay.services.result import ServiceResult
from kycpay.services.telemetry import traced

logger = logging.getLogger(__name__)


class InitService(BaseService):
    """Creates the ledger identity and price table."""

    @traced
    def init_ledger(
        self,
        owner: str,
        initial_prices: tuple[int, int],
        *,
        name: str | None = None,
    ) -> ServiceResult:
        """Initialize the ledger owned by *owner* with *initial_prices*.

        Both prices must be positive, matching the price table invariant.
        """
        op = "init_ledger"
        warnings: list[str] = []
        ledger_name = name or self._ledger.settings.ledger.name

        # ── VALIDATE ─────────────────────────────────────────────
        resolved = try_normalize(owner)
        if resolved is None or is_zero_address(resolved):
            return ServiceResult.failure(
                op, ErrorCode.INVALID_ADDRESS, f"Not a valid owner address: {owner!r}"
            )
        if len(initial_prices) != len(PRICE_SLOTS):
            return ServiceResult.failure(
                op,
                ErrorCode.INVALID_AMOUNT,
                f"Expected {len(PRICE_SLOTS)} initial prices, got {len(initial_prices)}",
            )
        for slot, amount in zip(PRICE_SLOTS, initial_prices, strict=True):
            if amount <= 0:
                return ServiceResult.failure(
                    op,
                    ErrorCode.INVALID_AMOUNT,
                    f"Initial price for slot {slot} can't be zero",
                    index=slot,
                )

        address = derive_ledger_address(resolved, ledger_name)

        # ── STORE ────────────────────────────────────────────────
        with self._ledger.transaction() as txn:
            existing = txn.get_meta()
            if existing is not None:
                return ServiceResult.failure(
                    op,
                    ErrorCode.ALREADY_INITIALIZED,
                    f"Ledger already initialized (owner {existing.owner})",
                    owner=existing.owner,
                    address=existing.address,
                )
            now = now_iso()
            txn.insert_meta(name=ledger_name, owner=resolved, address=address, created=now)
            for slot, amount in zip(PRICE_SLOTS, initial_prices, strict=True):
                txn.set_price(slot, amount, now)

        # ── STAMP ────────────────────────────────────────────────
        try:
            stamp_head(self._ledger.root)
        except Exception as exc:
            logger.debug("Alembic stamp failed", exc_info=True)
            warnings.append(f"Could not stamp migration head: {exc}")

        # ── RESPOND ──────────────────────────────────────────────
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "name": ledger_name,
                "owner": resolved,
                "address": address,
                "prices": [
                    {"index": slot, "amount": amount}
                    for slot, amount in zip(PRICE_SLOTS, initial_prices, strict=True)
                ],
                "symbol": self._ledger.token.symbol,
                "root": str(self._ledger.root),
            },
            warnings=warnings,
        )
