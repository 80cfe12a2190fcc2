"""Tests for the root kycpay CLI."""

import pytest
from click.testing import CliRunner

from kycpay import __version__
from kycpay.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "kycpay" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Global flags ---


@pytest.mark.parametrize(
    "flags",
    [
        ["--json"],
        ["-q"],
        ["-v"],
        ["--log-json"],
        ["--sync"],
        ["-c", "/tmp/missing-kycpay.toml"],
        ["--as", "0x70997970c51812dc3a010c7d01b50e0d17dc79c8"],
    ],
    ids=lambda flags: flags[0],
)
def test_global_flag_accepted(cli_runner: CliRunner, flags: list[str]) -> None:
    result = cli_runner.invoke(cli, [*flags, "--version"])
    assert result.exit_code == 0


# --- Command groups registered ---

EXPECTED_GROUPS = ["price", "bill", "pay", "treasury", "token"]

EXPECTED_COMMANDS = ["init", "upgrade"]


@pytest.mark.parametrize("group", EXPECTED_GROUPS)
def test_group_registered(cli_runner: CliRunner, group: str) -> None:
    result = cli_runner.invoke(cli, [group, "--help"])
    assert result.exit_code == 0, f"{group} --help failed: {result.output}"


@pytest.mark.parametrize("command", EXPECTED_COMMANDS)
def test_command_registered(cli_runner: CliRunner, command: str) -> None:
    result = cli_runner.invoke(cli, [command, "--help"])
    assert result.exit_code == 0, f"{command} --help failed: {result.output}"


def test_all_commands_in_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    for name in EXPECTED_GROUPS + EXPECTED_COMMANDS:
        assert name in result.output, f"{name} missing from --help"


def test_caller_from_env(
    cli_runner: CliRunner, tmp_path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """``KYCPAY_CALLER`` stands in for ``--as``."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("KYCPAY_LEDGER__DECIMALS", "0")
    monkeypatch.setenv("KYCPAY_CALLER", "0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266")
    result = cli_runner.invoke(cli, ["init", "1", "2"])
    assert result.exit_code == 0, result.output
    assert "0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266" in result.output
