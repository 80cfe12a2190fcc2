"""Tests for address validation, normalization, and derivation."""

from __future__ import annotations

import pytest

from kycpay.domain.identity import (
    ZERO_ADDRESS,
    derive_ledger_address,
    is_valid_address,
    is_zero_address,
    normalize_address,
    short_address,
)

CHECKSUMMED = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


class TestValidation:
    @pytest.mark.parametrize(
        "value",
        [CHECKSUMMED, ZERO_ADDRESS, "0x" + "ab" * 20],
    )
    def test_valid(self, value: str) -> None:
        assert is_valid_address(value)

    @pytest.mark.parametrize(
        "value",
        ["", "0x", "f39fd6e51aad88f6f4ce6ab8827279cfffb92266", "0x" + "g" * 40, "0x" + "a" * 39],
    )
    def test_invalid(self, value: str) -> None:
        assert not is_valid_address(value)


class TestNormalize:
    def test_lowercases(self) -> None:
        assert normalize_address(CHECKSUMMED) == CHECKSUMMED.lower()

    def test_strips_whitespace(self) -> None:
        assert normalize_address(f"  {CHECKSUMMED}\n") == CHECKSUMMED.lower()

    def test_rejects_malformed(self) -> None:
        with pytest.raises(ValueError, match="Not a valid address"):
            normalize_address("alice")


class TestZeroAddress:
    def test_zero(self) -> None:
        assert is_zero_address(ZERO_ADDRESS)
        assert is_zero_address(ZERO_ADDRESS.upper().replace("0X", "0x"))

    def test_nonzero(self) -> None:
        assert not is_zero_address(CHECKSUMMED)


class TestDerivation:
    def test_stable(self) -> None:
        assert derive_ledger_address(CHECKSUMMED, "kycpay") == derive_ledger_address(
            CHECKSUMMED.lower(), "kycpay"
        )

    def test_depends_on_name(self) -> None:
        assert derive_ledger_address(CHECKSUMMED, "a") != derive_ledger_address(CHECKSUMMED, "b")

    def test_shape(self) -> None:
        address = derive_ledger_address(CHECKSUMMED, "kycpay")
        assert is_valid_address(address)
        assert address == address.lower()
        assert not is_zero_address(address)


def test_short_address() -> None:
    assert short_address(CHECKSUMMED) == "0xf39F…2266"
    assert short_address("0x1234") == "0x1234"
