"""Ledger — repository pattern with atomic transaction coordination.

The Ledger is the single dependency injected into every service. It owns
the ledger database engine, the token ledger collaborator, and the event
bus. The :meth:`transaction` context manager wraps one operation:

- **DB**: Native SQLAlchemy ``engine.begin()`` with auto-commit/rollback.
- **Token ledger**: Called last inside the block. If it refuses, the
  exception propagates out of the block and every DB write made so far
  in the operation rolls back.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update

from kycpay.domain.amounts import from_storage, to_storage
from kycpay.infrastructure.database.engine import TOKEN_DB_FILENAME, init_database, state_dir
from kycpay.infrastructure.database.schema import bills, ledger_meta, prices
from kycpay.infrastructure.token import SqlTokenLedger

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from kycpay.config.settings import KycSettings
    from kycpay.infrastructure.token import TokenLedger
    from kycpay.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Row snapshots
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LedgerMeta:
    """Identity of a deployed ledger."""

    name: str
    owner: str
    address: str
    created: str


@dataclass(frozen=True)
class BillRow:
    """One (payer, label) bill as stored."""

    payer: str
    label: str
    amount: int
    status: str
    paid_amount: int | None
    paid_at: str | None
    created: str
    modified: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "payer": self.payer,
            "label": self.label,
            "amount": self.amount,
            "status": self.status,
            "paid_amount": self.paid_amount,
            "paid_at": self.paid_at,
            "created": self.created,
            "modified": self.modified,
        }


def _bill_from_row(row: Any) -> BillRow:
    return BillRow(
        payer=row.payer,
        label=row.label,
        amount=from_storage(row.amount),
        status=row.status,
        paid_amount=from_storage(row.paid_amount) if row.paid_amount is not None else None,
        paid_at=row.paid_at,
        created=row.created,
        modified=row.modified,
    )


# ---------------------------------------------------------------------------
# LedgerTransaction: yielded to callers within transaction()
# ---------------------------------------------------------------------------


@dataclass
class LedgerTransaction:
    """Active transaction context with a DB connection and the token ledger."""

    conn: Connection
    _ledger: Ledger

    @property
    def token(self) -> TokenLedger:
        return self._ledger.token

    # ------------------------------------------------------------------
    # Ledger identity
    # ------------------------------------------------------------------

    def get_meta(self) -> LedgerMeta | None:
        """Return the ledger identity, or None before ``init``."""
        row = self.conn.execute(select(ledger_meta).where(ledger_meta.c.id == 1)).first()
        if row is None:
            return None
        return LedgerMeta(name=row.name, owner=row.owner, address=row.address, created=row.created)

    def insert_meta(self, *, name: str, owner: str, address: str, created: str) -> None:
        self.conn.execute(
            insert(ledger_meta).values(
                id=1, name=name, owner=owner, address=address, created=created
            )
        )

    # ------------------------------------------------------------------
    # Price table
    # ------------------------------------------------------------------

    def get_price(self, slot: int) -> int | None:
        row = self.conn.execute(select(prices.c.amount).where(prices.c.slot == slot)).first()
        return from_storage(row.amount) if row is not None else None

    def list_prices(self) -> list[tuple[int, int]]:
        rows = self.conn.execute(select(prices.c.slot, prices.c.amount).order_by(prices.c.slot))
        return [(r.slot, from_storage(r.amount)) for r in rows]

    def set_price(self, slot: int, amount: int, modified: str) -> None:
        """Insert or overwrite the price in *slot*."""
        existing = self.conn.execute(select(prices.c.slot).where(prices.c.slot == slot)).first()
        if existing is None:
            self.conn.execute(
                insert(prices).values(slot=slot, amount=to_storage(amount), modified=modified)
            )
        else:
            self.conn.execute(
                update(prices)
                .where(prices.c.slot == slot)
                .values(amount=to_storage(amount), modified=modified)
            )

    # ------------------------------------------------------------------
    # Bill ledger
    # ------------------------------------------------------------------

    def get_bill(self, payer: str, label: str) -> BillRow | None:
        row = self.conn.execute(
            select(bills).where(bills.c.payer == payer, bills.c.label == label)
        ).first()
        return _bill_from_row(row) if row is not None else None

    def insert_bill(self, payer: str, label: str, amount: int, created: str) -> None:
        self.conn.execute(
            insert(bills).values(
                payer=payer,
                label=label,
                amount=to_storage(amount),
                status="open",
                created=created,
                modified=created,
            )
        )

    def update_bill(self, payer: str, label: str, **values: Any) -> None:
        """Update columns of one bill. Amount-valued columns are serialized here."""
        for key in ("amount", "paid_amount"):
            if values.get(key) is not None:
                values[key] = to_storage(values[key])
        self.conn.execute(
            update(bills).where(bills.c.payer == payer, bills.c.label == label).values(**values)
        )

    def list_bills(self, *, payer: str | None = None, status: str | None = None) -> list[BillRow]:
        stmt = select(bills)
        if payer is not None:
            stmt = stmt.where(bills.c.payer == payer)
        if status is not None:
            stmt = stmt.where(bills.c.status == status)
        stmt = stmt.order_by(bills.c.payer, bills.c.label)
        return [_bill_from_row(r) for r in self.conn.execute(stmt)]


# ---------------------------------------------------------------------------
# Ledger: the repository
# ---------------------------------------------------------------------------


class Ledger:
    """Repository encapsulating the ledger database and token collaborator.

    Constructed once at CLI startup from :class:`KycSettings` and stored
    on the click context. Services receive it via :class:`BaseService`.

    Parameters:
        settings: Resolved settings (root directory, token config).
        token: Token ledger to settle against. Defaults to the sandbox
            :class:`SqlTokenLedger` at ``{root}/.kycpay/token.db``.
    """

    def __init__(self, settings: KycSettings, *, token: TokenLedger | None = None) -> None:
        self._settings = settings
        self._engine: Engine = init_database(self.root)
        self._owns_token = token is None
        self._token: TokenLedger = token or SqlTokenLedger.open(
            state_dir(self.root) / TOKEN_DB_FILENAME,
            symbol=settings.ledger.symbol,
            decimals=settings.ledger.decimals,
        )
        self._event_bus: EventBus | None = None

    @property
    def root(self) -> Path:
        """The ledger root directory."""
        return self._settings.ledger_root

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def token(self) -> TokenLedger:
        """The token ledger collaborator."""
        return self._token

    @property
    def settings(self) -> KycSettings:
        return self._settings

    @property
    def event_bus(self) -> EventBus | None:
        """The plugin event bus (None if not initialized)."""
        return self._event_bus

    def init_event_bus(self, *, sync: bool = False) -> None:
        """Initialize the plugin event bus.

        Creates a PluginManager, discovers entry-point plugins, registers
        the built-in audit plugin when enabled, and wires up the EventBus.
        """
        from kycpay.plugins.builtins.audit import AuditPlugin
        from kycpay.plugins.event_bus import EventBus
        from kycpay.plugins.manager import PluginManager

        pm = PluginManager()
        pm.discover_and_load(local_dir=state_dir(self.root) / "plugins")
        if self._settings.plugins.audit:
            pm.register_plugin(AuditPlugin(), name="audit-builtin")

        events = self._settings.events
        self._event_bus = EventBus(
            self._engine,
            pm,
            sync=sync or events.sync,
            max_retries=events.max_retries,
            max_workers=events.max_workers,
        )

    def close(self) -> None:
        """Shut down the event bus and release database handles."""
        if self._event_bus is not None:
            self._event_bus.shutdown()
            self._event_bus = None
        if self._owns_token and isinstance(self._token, SqlTokenLedger):
            self._token.close()
        self._engine.dispose()

    @contextmanager
    def transaction(self) -> Iterator[LedgerTransaction]:
        """One atomic ledger operation.

        DB writes commit when the block exits normally and roll back if it
        raises. Token ledger calls belong at the end of the block, after
        every internal write, so a refused transfer undoes them.

        Usage::

            with ledger.transaction() as txn:
                txn.update_bill(payer, label, status="paid")
                txn.token.transfer_from(address, payer, address, amount)
        """
        with self._engine.begin() as conn:
            yield LedgerTransaction(conn=conn, _ledger=self)
