"""Tests for the init CLI command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from kycpay.cli import cli


@pytest.mark.usefixtures("_isolated_ledger")
class TestInitCommand:
    def test_init_as_caller(self, cli_runner: CliRunner, owner: str) -> None:
        result = cli_runner.invoke(cli, ["--as", owner, "init", "10", "20"])
        assert result.exit_code == 0, result.output
        assert "init_ledger" in result.output
        assert owner in result.output

    def test_init_json(self, cli_runner: CliRunner, owner: str) -> None:
        result = cli_runner.invoke(cli, ["--json", "init", "10", "20", "--owner", owner])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["data"]["owner"] == owner
        assert data["data"]["prices"] == [
            {"index": 0, "amount": 10},
            {"index": 1, "amount": 20},
        ]

    def test_init_creates_state_dir(self, cli_runner: CliRunner, owner: str) -> None:
        cli_runner.invoke(cli, ["--as", owner, "init", "1", "2"])
        assert (Path.cwd() / ".kycpay").is_dir()

    def test_init_custom_name(self, cli_runner: CliRunner, owner: str) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "--as", owner, "init", "1", "2", "--name", "desk"]
        )
        assert json.loads(result.output)["data"]["name"] == "desk"

    def test_init_twice_fails(self, cli_runner: CliRunner, owner: str) -> None:
        cli_runner.invoke(cli, ["--as", owner, "init", "10", "20"])
        result = cli_runner.invoke(cli, ["--json", "--as", owner, "init", "10", "20"])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "ALREADY_INITIALIZED"

    def test_init_without_owner_fails(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "init", "10", "20"])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "INVALID_ADDRESS"

    def test_init_zero_price_fails(self, cli_runner: CliRunner, owner: str) -> None:
        result = cli_runner.invoke(cli, ["--json", "--as", owner, "init", "0", "20"])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "INVALID_AMOUNT"

    def test_init_non_numeric_price_is_usage_error(
        self, cli_runner: CliRunner, owner: str
    ) -> None:
        result = cli_runner.invoke(cli, ["--as", owner, "init", "ten", "20"])
        assert result.exit_code == 2
        assert "PRICE_0" in result.output
