"""Command group: the general offer price table."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kycpay.commands._base import KycGroup
from kycpay.services.prices import PriceService

if TYPE_CHECKING:
    from kycpay.commands._context import AppContext

_PRICE_EXAMPLES = """\
  kycpay price list
  kycpay price get 0
  kycpay --as $OWNER price set 1 25"""


@click.group(cls=KycGroup, examples=_PRICE_EXAMPLES)
@click.pass_obj
def price(app: AppContext) -> None:
    """Read and set the two general offer prices."""


@price.command(
    "get",
    examples="""\
  kycpay price get 0
  kycpay --json price get 1""",
)
@click.argument("index", type=int)
@click.pass_obj
def get_cmd(app: AppContext, index: int) -> None:
    """Show the price in slot INDEX."""
    app.emit(PriceService(app.ledger).get_price(index))


@price.command(
    "list",
    examples="""\
  kycpay price list
  kycpay -v price list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """Show both price slots."""
    app.emit(PriceService(app.ledger).list_prices())


@price.command(
    "set",
    examples="""\
  kycpay --as $OWNER price set 0 12.5""",
)
@click.argument("index", type=int)
@click.argument("amount")
@click.pass_obj
def set_cmd(app: AppContext, index: int, amount: str) -> None:
    """Set slot INDEX to AMOUNT tokens (owner only)."""
    app.emit(PriceService(app.ledger).set_price(app.caller, index, app.parse_amount(amount)))
