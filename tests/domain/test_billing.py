"""Tests for price slots, labels, and the bill lifecycle."""

from __future__ import annotations

import pytest

from kycpay.domain.billing import (
    BILL_TRANSITIONS,
    NONE_LABEL,
    PRICE_SLOTS,
    BillStatus,
    is_payable,
    is_valid_label,
    is_valid_slot,
    is_valid_transition,
)


class TestSlots:
    def test_two_slots(self) -> None:
        assert PRICE_SLOTS == (0, 1)

    @pytest.mark.parametrize("index", [0, 1])
    def test_valid(self, index: int) -> None:
        assert is_valid_slot(index)

    @pytest.mark.parametrize("index", [-1, 2, 5])
    def test_invalid(self, index: int) -> None:
        assert not is_valid_slot(index)


class TestLabels:
    def test_none_label(self) -> None:
        assert NONE_LABEL == "none"

    @pytest.mark.parametrize("label", ["bill1", " ", "Bill1", "none", "kyc/2024"])
    def test_any_nonempty_string(self, label: str) -> None:
        assert is_valid_label(label)

    def test_empty(self) -> None:
        assert not is_valid_label("")


class TestLifecycle:
    def test_statuses_cover_transitions(self) -> None:
        assert set(BILL_TRANSITIONS) == set(BillStatus)

    def test_transitions_keyed_by_status_members(self) -> None:
        assert all(isinstance(key, BillStatus) for key in BILL_TRANSITIONS)
        assert BILL_TRANSITIONS[BillStatus.PAID] == {BillStatus.OPEN}

    def test_open_to_paid(self) -> None:
        assert is_valid_transition("open", "paid")

    def test_paid_reopens(self) -> None:
        assert is_valid_transition("paid", "open")

    def test_paid_cannot_be_paid_again(self) -> None:
        assert not is_valid_transition("paid", "paid")

    def test_unknown_status(self) -> None:
        assert not is_valid_transition("void", "open")


class TestPayable:
    def test_open_positive(self) -> None:
        assert is_payable(15, BillStatus.OPEN)

    def test_zero_amount(self) -> None:
        assert not is_payable(0, BillStatus.OPEN)

    def test_paid(self) -> None:
        assert not is_payable(15, BillStatus.PAID)
