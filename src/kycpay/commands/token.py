"""Command group: sandbox token ledger."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kycpay.commands._base import KycGroup
from kycpay.services.tokens import TokenService

if TYPE_CHECKING:
    from kycpay.commands._context import AppContext

_TOKEN_EXAMPLES = """\
  kycpay token mint $PAYER 100
  kycpay --as $PAYER token approve 15
  kycpay token balance $PAYER
  kycpay token allowance $PAYER"""


@click.group(cls=KycGroup, examples=_TOKEN_EXAMPLES)
@click.pass_obj
def token(app: AppContext) -> None:
    """Mint, approve, and inspect sandbox tokens."""


@token.command()
@click.argument("account")
@click.argument("amount")
@click.pass_obj
def mint(app: AppContext, account: str, amount: str) -> None:
    """Mint AMOUNT tokens to ACCOUNT."""
    app.emit(TokenService(app.ledger).mint(account, app.parse_amount(amount)))


@token.command()
@click.argument("amount")
@click.option("--owner", default=None, help="Approving account (defaults to --as).")
@click.option("--spender", default=None, help="Spender (defaults to the ledger address).")
@click.pass_obj
def approve(app: AppContext, amount: str, owner: str | None, spender: str | None) -> None:
    """Let the spender pull up to AMOUNT tokens from the owner."""
    svc = TokenService(app.ledger)
    app.emit(svc.approve(owner or app.caller, app.parse_amount(amount), spender=spender))


@token.command()
@click.argument("account")
@click.pass_obj
def balance(app: AppContext, account: str) -> None:
    """Show ACCOUNT's token balance."""
    app.emit(TokenService(app.ledger).balance_of(account))


@token.command()
@click.argument("owner")
@click.option("--spender", default=None, help="Spender (defaults to the ledger address).")
@click.pass_obj
def allowance(app: AppContext, owner: str, spender: str | None) -> None:
    """Show how much the spender may pull from OWNER."""
    app.emit(TokenService(app.ledger).allowance(owner, spender=spender))
