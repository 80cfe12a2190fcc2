"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Owns the lazily opened Ledger, the caller identity,
and result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kycpay.domain.amounts import parse_units
from kycpay.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from kycpay.config.settings import KycSettings
    from kycpay.infrastructure.ledger import Ledger
    from kycpay.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The ledger is opened on first use so ``--help`` and ``--version``
    never touch the database.
    """

    def __init__(self, settings: KycSettings) -> None:
        self.settings = settings
        self._ledger: Ledger | None = None

        from kycpay.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            ledger=settings.ledger,
            caller=settings.caller,
        )

        if settings.verbose:
            from kycpay.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def ledger(self) -> Ledger:
        """The ledger instance (created lazily on first access)."""
        if self._ledger is None:
            from kycpay.infrastructure.ledger import Ledger

            self._ledger = Ledger(self.settings)
            self._ledger.init_event_bus(sync=self.settings.sync)
        return self._ledger

    @property
    def caller(self) -> str:
        """Identity this invocation acts as (``--as`` / ``KYCPAY_CALLER``).

        Empty when unset; gated operations then fail with UNAUTHORIZED.
        """
        return self.settings.caller or ""

    def parse_amount(self, raw: str, *, param_hint: str = "AMOUNT") -> int:
        """Convert a human token amount to base units or raise a usage error."""
        try:
            return parse_units(raw, self.settings.ledger.decimals)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint=param_hint) from exc

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout. Warnings go to stderr so piped output stays clean.
        * Failure: stderr, then exit code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            decimals=self.settings.ledger.decimals,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def close(self) -> None:
        """Flush the event bus and release database handles."""
        if self._ledger is not None:
            self._ledger.close()
            self._ledger = None
