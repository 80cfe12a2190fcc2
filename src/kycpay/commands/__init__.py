"""Subcommand modules for kycpay.

Provides register_commands() which uses deferred imports to keep
``kycpay --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from kycpay.commands.bill import bill
    from kycpay.commands.pay import pay
    from kycpay.commands.price import price
    from kycpay.commands.token import token
    from kycpay.commands.treasury import treasury

    cli.add_command(price)
    cli.add_command(bill)
    cli.add_command(pay)
    cli.add_command(treasury)
    cli.add_command(token)

    # --- Standalone commands ---
    from kycpay.commands.init_cmd import init_cmd
    from kycpay.commands.upgrade import upgrade

    cli.add_command(init_cmd)
    cli.add_command(upgrade)
