"""BaseService — foundation for all kycpay services.

Every service receives a :class:`Ledger` at construction time and owns its
transaction boundaries via ``self._ledger.transaction()``. The access
control gate lives here so every operation passes through the same check
before it reads bills, writes state, or touches the token ledger.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from kycpay.domain.access import authorize
from kycpay.domain.types import Capability, ErrorCode
from kycpay.services._helpers import try_normalize
from kycpay.services.result import ServiceResult

if TYPE_CHECKING:
    from kycpay.infrastructure.ledger import Ledger, LedgerMeta, LedgerTransaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Gate:
    """Outcome of the access check for one operation.

    Exactly one of ``denied`` or (``meta``, ``caller``) is meaningful.
    """

    meta: LedgerMeta | None = None
    caller: str = ""
    denied: ServiceResult | None = None


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class PriceService(BaseService):
            def set_price(self, caller: str, index: int, amount: int) -> ServiceResult:
                with self._ledger.transaction() as txn:
                    gate = self._guard(txn, op, Capability.OWNER_ONLY, caller)
                    if gate.denied is not None:
                        return gate.denied
                    ...
    """

    def __init__(self, ledger: Ledger) -> None:
        self._ledger = ledger

    def _guard(
        self,
        txn: LedgerTransaction,
        op: str,
        capability: Capability,
        caller: str | None,
        *,
        party: str | None = None,
    ) -> Gate:
        """Resolve *caller* and check it against *capability*.

        Fails with ``NOT_INITIALIZED`` before ``init`` has stored an owner,
        and with ``UNAUTHORIZED`` when the caller is missing, malformed, or
        lacks the capability. *party* is the payer of the bill being
        accessed, for ``BILL_PARTY_ONLY``.
        """
        meta = txn.get_meta()
        if meta is None:
            return Gate(
                denied=ServiceResult.failure(
                    op,
                    ErrorCode.NOT_INITIALIZED,
                    "Ledger is not initialized; run 'kycpay init' first",
                )
            )

        resolved = try_normalize(caller)
        if resolved is None:
            return Gate(
                denied=ServiceResult.failure(
                    op,
                    ErrorCode.UNAUTHORIZED,
                    "Not authorized! Caller identity is missing or malformed",
                    caller=caller,
                )
            )

        if not authorize(capability, resolved, meta.owner, party=party):
            logger.debug("Denied %s to %s (%s)", op, resolved, capability)
            return Gate(
                denied=ServiceResult.failure(
                    op,
                    ErrorCode.UNAUTHORIZED,
                    "Not authorized!",
                    caller=resolved,
                    capability=str(capability),
                )
            )

        return Gate(meta=meta, caller=resolved)

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Dispatch a lifecycle event. No-op if event bus not initialized.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        bus = self._ledger.event_bus
        if bus is None:
            return
        try:
            bus.dispatch(hook_name, payload)
        except Exception:
            logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")
