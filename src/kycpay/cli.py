"""Root CLI group for kycpay with global flags and command registration."""

from __future__ import annotations

import click

from kycpay import __version__
from kycpay.commands import register_commands
from kycpay.commands._context import AppContext
from kycpay.config.settings import KycSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="kycpay")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with timing.")
@click.option("--log-json", is_flag=True, help="Structured JSON logs on stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--sync", is_flag=True, help="Run plugin hooks synchronously.")
@click.option("--as", "caller", default=None, metavar="ADDRESS", help="Act as this identity.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    sync: bool,
    caller: str | None,
) -> None:
    """kycpay — billing and settlement ledger for KYC payments."""
    ctx.ensure_object(dict)
    settings = KycSettings.from_cli(
        config_path=config_path,
        json_output=json_output or None,
        quiet=quiet or None,
        verbose=verbose or None,
        log_json=log_json or None,
        sync=sync or None,
        caller=caller,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
