"""Rich Console factory and theme for kycpay output.

Consoles render into a StringIO buffer so renderers keep a plain
``-> str`` contract. Rich drops color codes on its own when the output
is not a terminal (tests, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

KYC_THEME = Theme(
    {
        "kyc.ok": "bold green",
        "kyc.error": "bold red",
        "kyc.warning": "bold yellow",
        "kyc.op": "bold cyan",
        "kyc.key": "dim",
        "kyc.address": "bold blue",
        "kyc.amount": "magenta",
        "kyc.label": "bold",
        "kyc.status.open": "yellow",
        "kyc.status.paid": "green",
    }
)

_STATUS_STYLES: dict[str, str] = {
    "open": "kyc.status.open",
    "paid": "kyc.status.paid",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=KYC_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    return _STATUS_STYLES.get(status, "")
