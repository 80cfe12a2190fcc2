"""Pluggy hook specifications for kycpay ledger events.

Every state change that matters to an outside observer is announced once,
after its transaction commits. ``payment_completed`` is the settlement
record: ``kind`` is the price slot for general payments and ``2`` for
custom payments, and ``label`` is ``"none"`` for general payments.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("kycpay")


class KycpayHookSpec:
    """Hook specifications for the kycpay plugin system."""

    @hookspec
    def payment_completed(
        self,
        payer: str,
        amount: int,
        kind: int,
        label: str,
    ) -> None:
        """Called after a general or custom payment settles."""

    @hookspec
    def price_changed(self, index: int, old_amount: int, new_amount: int) -> None:
        """Called after the owner changes a price slot."""

    @hookspec
    def bill_created(self, payer: str, label: str, amount: int) -> None:
        """Called after a bill is created."""

    @hookspec
    def bill_amount_changed(
        self,
        payer: str,
        label: str,
        old_amount: int,
        new_amount: int,
    ) -> None:
        """Called after a bill is re-billed."""

    @hookspec
    def balance_withdrawn(self, destination: str, amount: int) -> None:
        """Called after the treasury balance is withdrawn."""
