"""Built-in audit plugin.

Writes one structured log line per ledger event under the
``kycpay.audit`` logger, so ``--log-json`` yields a machine-readable
audit trail of settlements, price changes, bills, and withdrawals.
"""

from __future__ import annotations

from typing import Any

import pluggy
import structlog

hookimpl = pluggy.HookimplMarker("kycpay")


class AuditPlugin:
    """Logs every ledger event it receives."""

    def __init__(self, logger: Any | None = None) -> None:
        self._log = logger or structlog.get_logger("kycpay.audit")

    @hookimpl
    def payment_completed(self, payer: str, amount: int, kind: int, label: str) -> None:
        self._log.info("payment_completed", payer=payer, amount=amount, kind=kind, label=label)

    @hookimpl
    def price_changed(self, index: int, old_amount: int, new_amount: int) -> None:
        self._log.info(
            "price_changed", index=index, old_amount=old_amount, new_amount=new_amount
        )

    @hookimpl
    def bill_created(self, payer: str, label: str, amount: int) -> None:
        self._log.info("bill_created", payer=payer, label=label, amount=amount)

    @hookimpl
    def bill_amount_changed(
        self,
        payer: str,
        label: str,
        old_amount: int,
        new_amount: int,
    ) -> None:
        self._log.info(
            "bill_amount_changed",
            payer=payer,
            label=label,
            old_amount=old_amount,
            new_amount=new_amount,
        )

    @hookimpl
    def balance_withdrawn(self, destination: str, amount: int) -> None:
        self._log.info("balance_withdrawn", destination=destination, amount=amount)
