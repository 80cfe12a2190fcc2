"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``KYCPAY_*`` prefix
  3. TOML file    — ``kycpay.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

The caller identity (``--as`` / ``KYCPAY_CALLER``) lives here as well; it
is the identity every gated operation is evaluated against.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from kycpay.config.discovery import find_config, find_ledger_root, read_config
from kycpay.config.models import EventsConfig, LedgerConfig, PluginsConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``kycpay.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            self._data = read_config(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class KycSettings(BaseSettings):
    """Unified settings for the kycpay CLI and services.

    Attributes:
        ledger_root: Directory holding ``.kycpay/`` (parent of
            ``kycpay.toml``, or CWD if no config found).
        config_path: Resolved config file, or None.
        caller: Identity the current invocation acts as.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "KYCPAY_",
        "env_nested_delimiter": "__",
    }

    ledger_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None
    caller: str | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    sync: bool = False

    # --- TOML sections ---
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    events: EventsConfig = Field(default_factory=EventsConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        ledger_root: Path | None = None,
        **cli_flags: Any,
    ) -> KycSettings:
        """Construct settings from a CLI invocation.

        Discovers ``kycpay.toml`` via walk-up (or explicit *config_path*),
        resolves *ledger_root* from the config file's parent directory or
        else the nearest enclosing ``.kycpay/`` ledger,
        and merges CLI flags as highest-priority overrides. Flags passed
        as None are dropped so env vars and TOML can still supply them.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(ledger_root)

        resolved_root = ledger_root
        if resolved_root is None:
            if toml_path is not None:
                resolved_root = toml_path.parent
            else:
                resolved_root = find_ledger_root() or Path.cwd()

        overrides = {k: v for k, v in cli_flags.items() if v is not None}

        _tls.toml_path = toml_path
        try:
            return cls(
                ledger_root=resolved_root,
                config_path=toml_path,
                **overrides,
            )
        finally:
            _tls.toml_path = None
