"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime

from kycpay.domain.identity import normalize_address


def now_iso() -> str:
    """Current UTC time as standard ISO 8601 (for audit trails and the WAL)."""
    return datetime.now(UTC).isoformat()


def now_compact() -> str:
    """Current UTC time as compact ISO (YYYYMMDDTHHmmss, for backup filenames)."""
    return datetime.now(UTC).strftime("%Y%m%dT%H%M%S")


def try_normalize(value: str | None) -> str | None:
    """Normalize an address, returning None when it is missing or malformed."""
    if value is None:
        return None
    try:
        return normalize_address(value)
    except ValueError:
        return None
