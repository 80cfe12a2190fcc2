"""Access control gate — one guard for every ledger operation.

Each operation declares a :class:`Capability`. ``authorize`` is the single
check evaluated before the operation touches state or the token ledger.
"""

from __future__ import annotations

from kycpay.domain.types import Capability


def authorize(
    capability: Capability,
    caller: str,
    owner: str,
    *,
    party: str | None = None,
) -> bool:
    """Return True if *caller* holds *capability*.

    Args:
        capability: Requirement declared by the operation.
        caller: Normalized identity invoking the operation.
        owner: Normalized owner identity of the ledger.
        party: For ``BILL_PARTY_ONLY``, the payer the bill belongs to.
    """
    if capability is Capability.OPEN:
        return True
    if caller == owner:
        return True
    if capability is Capability.BILL_PARTY_ONLY:
        return party is not None and caller == party
    return False
