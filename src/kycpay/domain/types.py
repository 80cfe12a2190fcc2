"""Classification enums shared by every layer.

Error codes are the distinguishing reasons carried by ``ServiceError.code``
so that callers can branch on a failure without parsing messages.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class Capability(StrEnum):
    """Access requirement declared by each ledger operation."""

    OWNER_ONLY = "owner_only"
    BILL_PARTY_ONLY = "bill_party_only"
    OPEN = "open"


class PaymentKind(IntEnum):
    """Discriminator carried by every settlement record.

    Price-slot payments use the slot index; bill payments use the
    ``CUSTOM`` sentinel, which sits just past the last slot.
    """

    SLOT_0 = 0
    SLOT_1 = 1
    CUSTOM = 2


class ErrorCode(StrEnum):
    """Failure reasons surfaced through ``ServiceError.code``."""

    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    BILL_ALREADY_EXISTS = "BILL_ALREADY_EXISTS"
    BILL_NOT_FOUND = "BILL_NOT_FOUND"
    INVALID_BILL = "INVALID_BILL"
    INSUFFICIENT_ALLOWANCE = "INSUFFICIENT_ALLOWANCE"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    ZERO_ADDRESS = "ZERO_ADDRESS"
    INVALID_OPTION = "INVALID_OPTION"
    INVALID_ADDRESS = "INVALID_ADDRESS"
    INVALID_LABEL = "INVALID_LABEL"
    NOT_INITIALIZED = "NOT_INITIALIZED"
    ALREADY_INITIALIZED = "ALREADY_INITIALIZED"
    TRANSFER_FAILED = "TRANSFER_FAILED"
    INVALID_LIMIT = "INVALID_LIMIT"
    UNSUPPORTED_OPERATION = "UNSUPPORTED_OPERATION"
    CHECK_FAILED = "CHECK_FAILED"
    BACKUP_FAILED = "BACKUP_FAILED"
    MIGRATION_FAILED = "MIGRATION_FAILED"
