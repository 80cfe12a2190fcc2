"""Tests for the format_result dispatcher and OutputSettings."""

import json

import pytest

from kycpay.output.formatters import OutputSettings, format_result
from kycpay.services.result import ServiceError, ServiceResult


def _ok(op: str = "test", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str = "test", msg: str = "fail") -> ServiceResult:
    return ServiceResult(ok=False, op=op, error=ServiceError(code="ERR", message=msg))


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False
        assert s.decimals == 18

    def test_frozen(self) -> None:
        s = OutputSettings(json_output=True)
        with pytest.raises(AttributeError):
            s.quiet = True  # type: ignore[misc]


class TestFormatResultJSON:
    def test_json_keeps_base_units(self) -> None:
        result = _ok("get_price", index=0, amount=10**18)
        data = json.loads(format_result(result, settings=OutputSettings(json_output=True)))
        assert data["ok"] is True
        assert data["op"] == "get_price"
        assert data["data"]["amount"] == 10**18

    def test_json_error(self) -> None:
        data = json.loads(format_result(_err("set_price", "Bad"), settings=OutputSettings(True)))
        assert data["ok"] is False
        assert data["error"]["message"] == "Bad"


class TestFormatResultHuman:
    def test_default_settings_render_human(self) -> None:
        output = format_result(_ok("get_price", index=1, amount=2 * 10**18))
        assert "OK" in output
        assert "2" in output

    def test_decimals_applied(self) -> None:
        output = format_result(
            _ok("get_price", index=0, amount=150),
            settings=OutputSettings(decimals=2),
        )
        assert "1.5" in output

    def test_quiet(self) -> None:
        output = format_result(_ok("set_price", index=0), settings=OutputSettings(quiet=True))
        assert output == "OK: set_price"
