"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, kycpay.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from kycpay.domain.identity import normalize_address


class LedgerConfig(BaseModel):
    """[ledger] section."""

    model_config = {"frozen": True}

    name: str = "kycpay"
    symbol: str = "USDT"
    decimals: int = Field(default=18, ge=0, le=36)


class EventsConfig(BaseModel):
    """[events] section."""

    model_config = {"frozen": True}

    sync: bool = False
    max_retries: int = Field(default=3, ge=1)
    max_workers: int = Field(default=2, ge=1)


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    audit: bool = True


class KycConfig(BaseModel):
    """Root configuration composing all kycpay.toml sections.

    ``caller`` is the identity commands act as when neither ``--as`` nor
    ``KYCPAY_CALLER`` is given.
    """

    model_config = {"frozen": True}

    caller: str | None = None
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    events: EventsConfig = Field(default_factory=EventsConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @field_validator("caller")
    @classmethod
    def _caller_is_address(cls, value: str | None) -> str | None:
        return None if value is None else normalize_address(value)
