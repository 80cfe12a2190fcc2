"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO); the caller
extracts the text via ``get_output(console)``. Renderers are dispatched
by ``result.op`` in :func:`render_result`. Unknown ops fall through to a
generic key-value renderer.

Amount-valued fields are shown in whole tokens using the ledger's
decimal count.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from kycpay.domain.amounts import DEFAULT_DECIMALS, format_units
from kycpay.domain.identity import short_address
from kycpay.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from kycpay.services.result import ServiceResult

    Renderer = Callable[..., None]

AMOUNT_KEYS = frozenset(
    {"amount", "previous", "balance", "allowance", "paid_amount", "required", "old_amount"}
)


# ── Public API ────────────────────────────────────────────────────────


def render_result(
    result: ServiceResult,
    *,
    verbose: bool = False,
    decimals: int = DEFAULT_DECIMALS,
) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose, decimals=decimals)
    else:
        _render_error(result, console, verbose=verbose, decimals=decimals)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    List results print one ``payer/label`` (or slot index) per line;
    everything else prints the OK line alone.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(_item_key(item) for item in items)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _item_key(item: dict[str, Any]) -> str:
    if "label" in item and "payer" in item:
        return f"{item['payer']}/{item['label']}"
    if "index" in item:
        return str(item["index"])
    return str(item.get("id", ""))


def _display(key: str, value: Any, decimals: int) -> str:
    if key in AMOUNT_KEYS and isinstance(value, int) and not isinstance(value, bool):
        return format_units(value, decimals)
    if isinstance(value, (dict, list)):
        return _json.dumps(value, separators=(",", ":"))
    return str(value)


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="kyc.ok")
    op = Text(f"  {result.op}", style="kyc.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any, decimals: int = DEFAULT_DECIMALS) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="kyc.key")
    shown = _display(key, value, decimals)
    if key in ("payer", "owner", "address", "ledger_address", "destination", "account", "spender"):
        v = Text(shown, style="kyc.address")
    elif key in AMOUNT_KEYS:
        v = Text(shown, style="kyc.amount")
    elif key == "label":
        v = Text(shown, style="kyc.label")
    elif key == "status":
        v = Text(shown, style=style_for_status(str(value)))
    else:
        v = Text(shown)
    console.print(k, v, end="")
    console.print()


def _fields(
    console: Console,
    data: dict[str, Any],
    keys: tuple[str, ...],
    decimals: int,
) -> None:
    for key in keys:
        if key in data and data[key] is not None:
            _field(console, key, data[key], decimals)


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{ak}={av}" for ak, av in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _render_error(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    decimals: int = DEFAULT_DECIMALS,
) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="kyc.error")
    op = Text(f"  {result.op}", style="kyc.op")
    code = Text(f" [{err.code}]" if err else "", style="dim")
    console.print(label, op, code, Text(" — "), Text(msg))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {_display(k, v, decimals)}")


# ── Ledger renderers ──────────────────────────────────────────────────


def _render_init(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    decimals: int = DEFAULT_DECIMALS,
) -> None:
    _status_line(console, result)
    d = result.data
    _fields(console, d, ("name", "owner", "address", "symbol"), decimals)
    for price in d.get("prices", []):
        _field(console, f"price[{price['index']}]", format_units(price["amount"], decimals))
    if verbose:
        _fields(console, d, ("root",), decimals)
        _render_meta(console, result)


def _render_price_table(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    decimals: int = DEFAULT_DECIMALS,
) -> None:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Slot", justify="right")
    table.add_column("Price", style="kyc.amount", justify="right")
    if verbose:
        table.add_column("Base units", style="dim", justify="right")
    for item in result.data.get("items", []):
        row = [str(item["index"]), format_units(item["amount"], decimals)]
        if verbose:
            row.append(str(item["amount"]))
        table.add_row(*row)
    console.print(table)


def _render_bill_table(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    decimals: int = DEFAULT_DECIMALS,
) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Payer", style="kyc.address", no_wrap=True)
    table.add_column("Label", style="kyc.label")
    table.add_column("Amount", style="kyc.amount", justify="right")
    table.add_column("Status")
    if verbose:
        table.add_column("Paid", justify="right")
        table.add_column("Modified", style="dim")
    for item in items:
        status = str(item.get("status", ""))
        row: list[str | Text] = [
            str(item["payer"]),
            Text(str(item["label"])),
            format_units(item["amount"], decimals),
            Text(status, style=style_for_status(status)),
        ]
        if verbose:
            paid = item.get("paid_amount")
            row.append(format_units(paid, decimals) if paid is not None else "")
            row.append(str(item.get("modified", "")))
        table.add_row(*row)
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} bills")


def _render_history(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    decimals: int = DEFAULT_DECIMALS,
) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Payer", style="kyc.address", no_wrap=True)
    table.add_column("Amount", style="kyc.amount", justify="right")
    table.add_column("Kind", justify="right")
    table.add_column("Label", style="kyc.label")
    if verbose:
        table.add_column("Created", style="dim")
    for item in items:
        payer = str(item.get("payer", ""))
        row: list[str | Text] = [
            str(item.get("id", "")),
            payer if verbose else short_address(payer),
            format_units(int(item.get("amount", 0)), decimals),
            str(item.get("kind", "")),
            Text(str(item.get("label", ""))),
        ]
        if verbose:
            row.append(str(item.get("created", "")))
        table.add_row(*row)
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} payments")


def _render_bill(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    decimals: int = DEFAULT_DECIMALS,
) -> None:
    _status_line(console, result)
    keys: tuple[str, ...] = ("payer", "label", "amount", "previous", "status")
    if verbose:
        keys += ("paid_amount", "paid_at", "created", "modified")
    _fields(console, result.data, keys, decimals)
    if verbose:
        _render_meta(console, result)


def _render_payment(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    decimals: int = DEFAULT_DECIMALS,
) -> None:
    _status_line(console, result)
    _fields(console, result.data, ("payer", "amount", "kind", "kind_name", "label"), decimals)
    if verbose:
        _render_meta(console, result)


def _render_upgrade(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    decimals: int = DEFAULT_DECIMALS,
) -> None:
    _status_line(console, result)
    d = result.data
    _fields(
        console,
        d,
        (
            "ledger_name",
            "ledger_address",
            "applied_count",
            "pending_count",
            "current",
            "head",
            "backup_path",
            "message",
        ),
        decimals,
    )
    if d.get("applied"):
        console.print()
        for revision in d["applied"]:
            console.print(Text(f"  applied {revision}", style="kyc.ok"))
    if verbose and d.get("pending"):
        console.print()
        for p in d["pending"]:
            console.print(f"  {p['revision']}: {p['description']}")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    decimals: int = DEFAULT_DECIMALS,
) -> None:
    """Status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value, decimals)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Renderer] = {
    "init_ledger": _render_init,
    # Prices
    "get_price": _render_generic,
    "set_price": _render_generic,
    "list_prices": _render_price_table,
    # Bills
    "create_bill": _render_bill,
    "get_billed_amount": _render_bill,
    "change_billed_amount": _render_bill,
    "list_bills": _render_bill_table,
    # Payments
    "general_payment": _render_payment,
    "custom_payment": _render_payment,
    "history": _render_history,
    # Upgrade
    "upgrade": _render_upgrade,
}
