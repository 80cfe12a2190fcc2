"""Identity (address) patterns, normalization, and derivation.

Identities are 20-byte hex addresses (``0x`` + 40 hex digits). They are
lowercased on the way in so that every comparison is an exact string match.

INVARIANT: A derived ledger address is stable. The same owner and ledger
name always produce the same address.
"""

from __future__ import annotations

import hashlib
import re

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")

ZERO_ADDRESS = "0x" + "0" * 40


def is_valid_address(value: str) -> bool:
    """Check whether *value* looks like a hex address."""
    return ADDRESS_PATTERN.match(value) is not None


def normalize_address(value: str) -> str:
    """Return the canonical lowercase form of *value*.

    Raises:
        ValueError: If *value* is not a ``0x``-prefixed 40-digit hex string.
    """
    candidate = value.strip()
    if not is_valid_address(candidate):
        msg = f"Not a valid address: {value!r}"
        raise ValueError(msg)
    return candidate.lower()


def is_zero_address(value: str) -> bool:
    """True for the null identity (case-insensitive)."""
    return value.strip().lower() == ZERO_ADDRESS


def derive_ledger_address(owner: str, name: str) -> str:
    """Derive the ledger's own address from its owner and name.

    Takes the last 20 bytes of ``sha256(owner || ":" || name)``, the same
    way a deployed contract address is a hash of its deployer.
    """
    payload = f"{normalize_address(owner)}:{name}".encode()
    digest = hashlib.sha256(payload).hexdigest()
    return "0x" + digest[-40:]


def short_address(value: str) -> str:
    """Abbreviate an address for display (``0x1234…abcd``)."""
    if len(value) <= 12:
        return value
    return f"{value[:6]}…{value[-4:]}"
