"""Command group: settlement."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kycpay.commands._base import KycGroup
from kycpay.services.payments import PaymentService

if TYPE_CHECKING:
    from kycpay.commands._context import AppContext

_PAY_EXAMPLES = """\
  kycpay --as $PAYER pay general 0
  kycpay --as $PAYER pay custom bill1
  kycpay --as $PAYER pay history"""


@click.group(cls=KycGroup, examples=_PAY_EXAMPLES)
@click.pass_obj
def pay(app: AppContext) -> None:
    """Pay a general offer or a custom bill as the caller."""


@pay.command(
    examples="""\
  kycpay token approve 10 --owner $PAYER
  kycpay --as $PAYER pay general 0""",
)
@click.argument("index", type=int)
@click.pass_obj
def general(app: AppContext, index: int) -> None:
    """Pay the price in slot INDEX."""
    app.emit(PaymentService(app.ledger).general_payment(app.caller, index))


@pay.command(
    examples="""\
  kycpay --as $PAYER pay custom bill1""",
)
@click.argument("label")
@click.pass_obj
def custom(app: AppContext, label: str) -> None:
    """Pay the caller's bill LABEL in full."""
    app.emit(PaymentService(app.ledger).custom_payment(app.caller, label))


@pay.command(
    examples="""\
  kycpay --as $OWNER pay history
  kycpay --as $OWNER pay history --payer $PAYER --limit 5""",
)
@click.option("--payer", default=None, help="Only this payer's payments.")
@click.option("--limit", default=50, type=click.IntRange(min=1), help="Max records.")
@click.pass_obj
def history(app: AppContext, payer: str | None, limit: int) -> None:
    """List settled payments, newest first."""
    app.emit(PaymentService(app.ledger).history(app.caller, payer=payer, limit=limit))
