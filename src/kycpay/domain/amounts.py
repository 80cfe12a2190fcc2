"""Monetary amounts in token base units.

Amounts are plain non-negative Python ints (arbitrary precision). Human
input such as ``"1.5"`` is converted with :func:`parse_units` using the
token's decimal count, the same convention as ``parseEther``.

Storage is decimal text because SQLite integers stop at 64 bits, which a
few tokens' worth of 18-decimal base units already exceeds.
"""

from __future__ import annotations

from decimal import Decimal, Inexact, InvalidOperation, localcontext

DEFAULT_DECIMALS = 18


def parse_units(value: str | int | Decimal, decimals: int = DEFAULT_DECIMALS) -> int:
    """Convert a human token amount to base units.

    Raises:
        ValueError: If *value* is not a number, is negative, or carries
            more fractional digits than *decimals* allows.

    Examples:
        >>> parse_units("1", 18)
        1000000000000000000
        >>> parse_units("0.5", 2)
        50
    """
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation as exc:
        msg = f"Not a number: {value!r}"
        raise ValueError(msg) from exc
    if not number.is_finite():
        msg = f"Not a finite amount: {value!r}"
        raise ValueError(msg)
    if number < 0:
        msg = f"Amount can't be negative: {value!r}"
        raise ValueError(msg)
    with localcontext() as ctx:
        # Precision covers every input digit, so scaling never rounds.
        ctx.prec = len(number.as_tuple().digits) + decimals + 1
        ctx.traps[Inexact] = True
        try:
            scaled = number.scaleb(decimals)
        except Inexact as exc:
            msg = f"Amount can't be represented exactly: {value!r}"
            raise ValueError(msg) from exc
    if scaled != scaled.to_integral_value():
        msg = f"Too many decimal places for {decimals}-decimal token: {value!r}"
        raise ValueError(msg)
    return int(scaled)


def format_units(amount: int, decimals: int = DEFAULT_DECIMALS) -> str:
    """Render base units as a human token amount without trailing zeros.

    Examples:
        >>> format_units(1500000000000000000, 18)
        '1.5'
        >>> format_units(0, 18)
        '0'
    """
    whole, frac = divmod(amount, 10**decimals)
    if frac == 0 or decimals == 0:
        return str(whole)
    digits = str(frac).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{digits}"


def to_storage(amount: int) -> str:
    """Serialize an amount for a TEXT column."""
    return str(int(amount))


def from_storage(raw: str | int | None) -> int:
    """Deserialize a TEXT column back into an amount (missing reads as 0)."""
    if raw is None or raw == "":
        return 0
    return int(raw)
