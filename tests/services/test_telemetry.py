"""Tests for the @traced decorator and trace_span."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from kycpay.services.result import ServiceResult
from kycpay.services.telemetry import (
    disable_telemetry,
    enable_telemetry,
    trace_span,
    traced,
)


@pytest.fixture
def telemetry() -> Iterator[None]:
    enable_telemetry()
    try:
        yield
    finally:
        disable_telemetry()


class _Svc:
    @traced
    def work(self) -> ServiceResult:
        with trace_span("inner") as span:
            if span is not None:
                span.annotate("rows", 3)
        return ServiceResult(ok=True, op="work")


def test_disabled_leaves_meta_empty() -> None:
    assert _Svc().work().meta is None


@pytest.mark.usefixtures("telemetry")
def test_enabled_injects_span_tree() -> None:
    result = _Svc().work()
    assert result.meta is not None
    tree = result.meta["telemetry"]
    assert tree["name"] == "_Svc.work"
    assert tree["children"][0]["name"] == "inner"
    assert tree["children"][0]["annotations"] == {"rows": 3}


def test_span_outside_trace_yields_none() -> None:
    with trace_span("orphan") as span:
        assert span is None
