"""Command group: per-payer bills."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kycpay.commands._base import KycGroup
from kycpay.domain.billing import BillStatus
from kycpay.services.bills import BillService

if TYPE_CHECKING:
    from kycpay.commands._context import AppContext

_BILL_EXAMPLES = """\
  kycpay --as $OWNER bill create $PAYER 50 bill1
  kycpay --as $OWNER bill change $PAYER bill1 15
  kycpay --as $PAYER bill show $PAYER bill1
  kycpay --as $OWNER bill list --status open"""


@click.group(cls=KycGroup, examples=_BILL_EXAMPLES)
@click.pass_obj
def bill(app: AppContext) -> None:
    """Create, inspect, and re-bill custom bills."""


@bill.command(
    examples="""\
  kycpay --as $OWNER bill create 0x70997970c51812dc3a010c7d01b50e0d17dc79c8 50 bill1""",
)
@click.argument("payer")
@click.argument("amount")
@click.argument("label")
@click.pass_obj
def create(app: AppContext, payer: str, amount: str, label: str) -> None:
    """Bill PAYER for AMOUNT tokens under LABEL (owner only)."""
    svc = BillService(app.ledger)
    app.emit(svc.create_bill(app.caller, payer, app.parse_amount(amount), label))


@bill.command(
    examples="""\
  kycpay --as $PAYER bill show $PAYER bill1""",
)
@click.argument("payer")
@click.argument("label")
@click.pass_obj
def show(app: AppContext, payer: str, label: str) -> None:
    """Show the outstanding amount of PAYER's bill LABEL (owner or payer)."""
    app.emit(BillService(app.ledger).get_billed_amount(app.caller, payer, label))


@bill.command(
    examples="""\
  kycpay --as $OWNER bill change $PAYER bill1 15
  kycpay --as $OWNER bill change $PAYER bill1 0""",
)
@click.argument("payer")
@click.argument("label")
@click.argument("amount")
@click.pass_obj
def change(app: AppContext, payer: str, label: str, amount: str) -> None:
    """Overwrite the amount of PAYER's bill LABEL (owner only)."""
    svc = BillService(app.ledger)
    app.emit(svc.change_billed_amount(app.caller, payer, label, app.parse_amount(amount)))


@bill.command(
    "list",
    examples="""\
  kycpay --as $OWNER bill list
  kycpay --as $PAYER bill list --payer $PAYER --status paid""",
)
@click.option("--payer", default=None, help="Only this payer's bills.")
@click.option(
    "--status",
    type=click.Choice([str(s) for s in BillStatus]),
    default=None,
    help="Filter by status.",
)
@click.pass_obj
def list_cmd(app: AppContext, payer: str | None, status: str | None) -> None:
    """List bills (all for the owner, or one payer's own)."""
    app.emit(BillService(app.ledger).list_bills(app.caller, payer=payer, status=status))
