"""Tests for ledger root and kycpay.toml discovery."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from kycpay.config.discovery import CONFIG_ENV_VAR, find_config, find_ledger_root, read_config


class TestFindConfig:
    def test_walks_up(self, tmp_path: Path) -> None:
        (tmp_path / "kycpay.toml").write_text("")
        deep = tmp_path / "x" / "y"
        deep.mkdir(parents=True)
        assert find_config(deep) == (tmp_path / "kycpay.toml").resolve()

    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "elsewhere.toml"
        custom.write_text("")
        (tmp_path / "kycpay.toml").write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(custom))
        assert find_config(tmp_path) == custom

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.toml"))
        assert find_config(tmp_path) is None


class TestFindLedgerRoot:
    def test_state_dir_marks_root(self, tmp_path: Path) -> None:
        (tmp_path / ".kycpay").mkdir()
        deep = tmp_path / "invoices" / "2026"
        deep.mkdir(parents=True)
        assert find_ledger_root(deep) == tmp_path.resolve()

    def test_config_marks_root(self, tmp_path: Path) -> None:
        (tmp_path / "kycpay.toml").write_text("")
        deep = tmp_path / "a"
        deep.mkdir()
        assert find_ledger_root(deep) == tmp_path.resolve()

    def test_nearest_ledger_wins(self, tmp_path: Path) -> None:
        (tmp_path / ".kycpay").mkdir()
        inner = tmp_path / "desk"
        (inner / ".kycpay").mkdir(parents=True)
        assert find_ledger_root(inner) == inner.resolve()

    def test_state_file_is_not_a_ledger(self, tmp_path: Path) -> None:
        (tmp_path / ".kycpay").write_text("")
        assert find_ledger_root(tmp_path) != tmp_path.resolve()


class TestReadConfig:
    def test_sparse_table_returned_as_written(self, tmp_path: Path) -> None:
        path = tmp_path / "kycpay.toml"
        path.write_text('[events]\nmax_workers = 4\n')
        assert read_config(path) == {"events": {"max_workers": 4}}

    def test_ledger_and_caller(self, tmp_path: Path) -> None:
        path = tmp_path / "kycpay.toml"
        caller = "0x" + "ab" * 20
        path.write_text(f'caller = "{caller}"\n[ledger]\nname = "desk"\nsymbol = "DAI"\n')
        data = read_config(path)
        assert data["caller"] == caller
        assert data["ledger"] == {"name": "desk", "symbol": "DAI"}

    def test_bad_syntax_names_file(self, tmp_path: Path) -> None:
        path = tmp_path / "kycpay.toml"
        path.write_text("[ledger\n")
        with pytest.raises(click.ClickException, match="Invalid TOML in .*kycpay.toml"):
            read_config(path)

    def test_bad_caller_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "kycpay.toml"
        path.write_text('caller = "alice"\n')
        with pytest.raises(click.ClickException, match="caller"):
            read_config(path)

    def test_decimals_out_of_range(self, tmp_path: Path) -> None:
        path = tmp_path / "kycpay.toml"
        path.write_text("[ledger]\ndecimals = 99\n")
        with pytest.raises(click.ClickException, match=r"ledger\.decimals"):
            read_config(path)
