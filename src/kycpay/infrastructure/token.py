"""Token ledger — the external fungible-token collaborator.

The ledger never owns token state. It talks to any object satisfying
:class:`TokenLedger` (ERC20-shaped: balance, allowance, pull and push
transfers). :class:`SqlTokenLedger` is the local sandbox implementation,
kept in its own SQLite file so its state is governed separately from the
ledger database.

Every mutating call is atomic: it runs inside a single ``engine.begin()``
block and either applies all balance/allowance changes or raises
:class:`TokenLedgerError` and applies none.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sqlalchemy import Column, MetaData, Table, Text, UniqueConstraint, insert, select, update

from kycpay.domain.amounts import from_storage, to_storage
from kycpay.domain.identity import is_zero_address, normalize_address
from kycpay.infrastructure.database.engine import create_db_engine

if TYPE_CHECKING:
    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

token_metadata = MetaData()

token_balances = Table(
    "token_balances",
    token_metadata,
    Column("account", Text, primary_key=True),
    Column("amount", Text, nullable=False),
)

token_allowances = Table(
    "token_allowances",
    token_metadata,
    Column("owner", Text, nullable=False),
    Column("spender", Text, nullable=False),
    Column("amount", Text, nullable=False),
    UniqueConstraint("owner", "spender"),
)


class TokenLedgerError(Exception):
    """The token ledger refused an operation (the equivalent of a revert)."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


@runtime_checkable
class TokenLedger(Protocol):
    """Interface consumed by the settlement engine and treasury."""

    symbol: str
    decimals: int

    def balance_of(self, account: str) -> int: ...

    def allowance(self, owner: str, spender: str) -> int: ...

    def transfer_from(self, spender: str, source: str, destination: str, amount: int) -> bool: ...

    def transfer(self, sender: str, destination: str, amount: int) -> bool: ...

    def approve(self, owner: str, spender: str, amount: int) -> bool: ...


class SqlTokenLedger:
    """SQLite-backed sandbox token with ``mint``.

    Parameters:
        engine: SQLAlchemy engine holding the token tables.
        symbol: Display symbol.
        decimals: Base-unit decimal count.
    """

    def __init__(self, engine: Engine, *, symbol: str = "USDT", decimals: int = 18) -> None:
        self._engine = engine
        self.symbol = symbol
        self.decimals = decimals
        token_metadata.create_all(engine)

    @classmethod
    def open(cls, path: Path, *, symbol: str = "USDT", decimals: int = 18) -> SqlTokenLedger:
        """Open (creating if needed) a token database file at *path*."""
        path.parent.mkdir(parents=True, exist_ok=True)
        return cls(create_db_engine(path), symbol=symbol, decimals=decimals)

    @property
    def engine(self) -> Engine:
        return self._engine

    def close(self) -> None:
        """Dispose of the underlying engine."""
        self._engine.dispose()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def balance_of(self, account: str) -> int:
        with self._engine.connect() as conn:
            return _balance(conn, normalize_address(account))

    def allowance(self, owner: str, spender: str) -> int:
        with self._engine.connect() as conn:
            return _allowance(conn, normalize_address(owner), normalize_address(spender))

    def total_supply(self) -> int:
        with self._engine.connect() as conn:
            rows = conn.execute(select(token_balances.c.amount)).fetchall()
        return sum(from_storage(r.amount) for r in rows)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def mint(self, account: str, amount: int) -> None:
        """Create *amount* new tokens in *account*."""
        account = normalize_address(account)
        _require_amount(amount)
        with self._engine.begin() as conn:
            _set_balance(conn, account, _balance(conn, account) + amount)
        logger.debug("Minted %d to %s", amount, account)

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        """Set *spender*'s allowance over *owner*'s tokens to *amount*."""
        owner = normalize_address(owner)
        spender = normalize_address(spender)
        _require_amount(amount)
        if is_zero_address(spender):
            raise TokenLedgerError("approve to the zero address")
        with self._engine.begin() as conn:
            _set_allowance(conn, owner, spender, amount)
        return True

    def transfer(self, sender: str, destination: str, amount: int) -> bool:
        """Push *amount* from *sender* to *destination*."""
        sender = normalize_address(sender)
        destination = normalize_address(destination)
        _require_amount(amount)
        if is_zero_address(destination):
            raise TokenLedgerError("transfer to the zero address")
        with self._engine.begin() as conn:
            _move(conn, sender, destination, amount)
        return True

    def transfer_from(self, spender: str, source: str, destination: str, amount: int) -> bool:
        """Pull *amount* from *source* to *destination* using *spender*'s allowance."""
        spender = normalize_address(spender)
        source = normalize_address(source)
        destination = normalize_address(destination)
        _require_amount(amount)
        if is_zero_address(destination):
            raise TokenLedgerError("transfer to the zero address")
        with self._engine.begin() as conn:
            allowed = _allowance(conn, source, spender)
            if allowed < amount:
                raise TokenLedgerError("insufficient allowance")
            _move(conn, source, destination, amount)
            _set_allowance(conn, source, spender, allowed - amount)
        return True


# ---------------------------------------------------------------------------
# Row helpers (caller owns the transaction)
# ---------------------------------------------------------------------------


def _require_amount(amount: int) -> None:
    if amount < 0:
        raise TokenLedgerError("negative amount")


def _balance(conn: Connection, account: str) -> int:
    row = conn.execute(
        select(token_balances.c.amount).where(token_balances.c.account == account)
    ).first()
    return from_storage(row.amount) if row is not None else 0


def _set_balance(conn: Connection, account: str, amount: int) -> None:
    exists = conn.execute(
        select(token_balances.c.account).where(token_balances.c.account == account)
    ).first()
    if exists is None:
        conn.execute(insert(token_balances).values(account=account, amount=to_storage(amount)))
    else:
        conn.execute(
            update(token_balances)
            .where(token_balances.c.account == account)
            .values(amount=to_storage(amount))
        )


def _allowance(conn: Connection, owner: str, spender: str) -> int:
    row = conn.execute(
        select(token_allowances.c.amount).where(
            token_allowances.c.owner == owner,
            token_allowances.c.spender == spender,
        )
    ).first()
    return from_storage(row.amount) if row is not None else 0


def _set_allowance(conn: Connection, owner: str, spender: str, amount: int) -> None:
    exists = conn.execute(
        select(token_allowances.c.owner).where(
            token_allowances.c.owner == owner,
            token_allowances.c.spender == spender,
        )
    ).first()
    if exists is None:
        conn.execute(
            insert(token_allowances).values(
                owner=owner, spender=spender, amount=to_storage(amount)
            )
        )
    else:
        conn.execute(
            update(token_allowances)
            .where(
                token_allowances.c.owner == owner,
                token_allowances.c.spender == spender,
            )
            .values(amount=to_storage(amount))
        )


def _move(conn: Connection, source: str, destination: str, amount: int) -> None:
    source_balance = _balance(conn, source)
    if source_balance < amount:
        raise TokenLedgerError("transfer amount exceeds balance")
    _set_balance(conn, source, source_balance - amount)
    _set_balance(conn, destination, _balance(conn, destination) + amount)
