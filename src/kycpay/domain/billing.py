"""Price slots, bill labels, and the bill lifecycle.

Bill lifecycle:
- ``open``: created by the owner, payable while its amount is positive.
- ``paid``: settled once by its payer. Only re-billing by the owner
  (a new amount) brings it back to ``open``.
"""

from __future__ import annotations

from enum import StrEnum

PRICE_SLOTS: tuple[int, ...] = (0, 1)

NONE_LABEL = "none"


class BillStatus(StrEnum):
    """Settlement status of a bill."""

    OPEN = "open"
    PAID = "paid"


BILL_TRANSITIONS: dict[BillStatus, frozenset[BillStatus]] = {
    BillStatus.OPEN: frozenset({BillStatus.OPEN, BillStatus.PAID}),
    BillStatus.PAID: frozenset({BillStatus.OPEN}),
}


def is_valid_slot(index: int) -> bool:
    """True if *index* addresses one of the price slots."""
    return index in PRICE_SLOTS


def is_valid_label(label: str) -> bool:
    """Labels are opaque, exact-match keys; the only rule is non-empty."""
    return isinstance(label, str) and label != ""


def is_valid_transition(current: str, target: str) -> bool:
    """Check if a bill may move from *current* to *target*."""
    return target in BILL_TRANSITIONS.get(current, frozenset())


def is_payable(amount: int, status: str) -> bool:
    """A bill can be settled only while open with a positive amount."""
    return amount > 0 and is_valid_transition(status, BillStatus.PAID)
