"""Output mode selection.

The CLI renders a ServiceResult for humans (Rich) or for machines
(``--json``). ``--quiet`` trims human output to the bare minimum.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from kycpay.domain.amounts import DEFAULT_DECIMALS

if TYPE_CHECKING:
    from kycpay.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """How to present results for one invocation."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    decimals: int = DEFAULT_DECIMALS


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult according to *settings*.

    JSON output always carries raw base-unit integers; human output shows
    amounts in whole tokens.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)

    from kycpay.output.renderers import render_quiet, render_result

    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose, decimals=settings.decimals)
