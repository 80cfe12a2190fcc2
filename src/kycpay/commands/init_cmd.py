"""Command: ledger initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kycpay.commands._base import KycCommand

if TYPE_CHECKING:
    from kycpay.commands._context import AppContext

_INIT_EXAMPLES = """\
  kycpay init --owner 0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266 10 20
  kycpay --as 0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266 init 0.5 1.25 --name kyc-desk"""


@click.command("init", cls=KycCommand, examples=_INIT_EXAMPLES)
@click.argument("price_0")
@click.argument("price_1")
@click.option("--owner", default=None, help="Owner address (defaults to --as).")
@click.option("--name", default=None, help="Ledger name (defaults to [ledger] name).")
@click.pass_obj
def init_cmd(
    app: AppContext,
    price_0: str,
    price_1: str,
    owner: str | None,
    name: str | None,
) -> None:
    """Create the ledger with its owner and two initial prices."""
    from kycpay.services.init import InitService

    prices = (
        app.parse_amount(price_0, param_hint="PRICE_0"),
        app.parse_amount(price_1, param_hint="PRICE_1"),
    )
    app.emit(InitService(app.ledger).init_ledger(owner or app.caller, prices, name=name))
