"""Command group: the ledger's collected token balance."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kycpay.commands._base import KycGroup
from kycpay.services.treasury import TreasuryService

if TYPE_CHECKING:
    from kycpay.commands._context import AppContext

_TREASURY_EXAMPLES = """\
  kycpay --as $OWNER treasury balance
  kycpay --as $OWNER treasury withdraw 0x3c44cdddb6a900fa2b585dd299e03d12fa4293bc"""


@click.group(cls=KycGroup, examples=_TREASURY_EXAMPLES)
@click.pass_obj
def treasury(app: AppContext) -> None:
    """Inspect and withdraw collected payments (owner only)."""


@treasury.command()
@click.pass_obj
def balance(app: AppContext) -> None:
    """Show the ledger's token balance."""
    app.emit(TreasuryService(app.ledger).read_balance(app.caller))


@treasury.command()
@click.argument("destination")
@click.pass_obj
def withdraw(app: AppContext, destination: str) -> None:
    """Send the whole balance to DESTINATION."""
    app.emit(TreasuryService(app.ledger).withdraw_balance(app.caller, destination))
