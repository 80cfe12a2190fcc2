"""Command: ledger schema migration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kycpay.commands._base import KycCommand

if TYPE_CHECKING:
    from kycpay.commands._context import AppContext


@click.command(
    cls=KycCommand,
    examples="""\
  kycpay upgrade --check
  kycpay upgrade
  kycpay --json upgrade --no-backup""",
)
@click.option(
    "--check", "check_only", is_flag=True, help="Show pending migrations without applying."
)
@click.option(
    "--backup/--no-backup",
    default=True,
    show_default=True,
    help="Snapshot the ledger and token databases to .kycpay/backups/ first.",
)
@click.pass_obj
def upgrade(app: AppContext, check_only: bool, backup: bool) -> None:
    """Bring the ledger database up to the current schema.

    Backups are named after the ledger (name and address prefix), so one
    backups folder can hold snapshots of several ledgers.
    """
    from kycpay.services.upgrade import UpgradeService

    svc = UpgradeService(app.ledger)
    app.emit(svc.check_pending() if check_only else svc.apply(backup=backup))
