"""structlog configuration for kycpay.

Two output modes:
- Human (default): colored console output to stderr
- JSON (--log-json): structured JSON lines to stderr

Every line carries the ledger it was written for (``ledger``, ``symbol``)
and, when known, the ``caller`` the invocation acts as. Token amounts are
arbitrary-precision integers; JSON output writes the ones a double cannot
hold exactly as decimal strings.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

    from kycpay.config.models import LedgerConfig

# Largest integer every JSON reader can represent exactly.
MAX_SAFE_INTEGER = 2**53 - 1


def _exact_amounts(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    for key, value in event_dict.items():
        if type(value) is int and abs(value) > MAX_SAFE_INTEGER:
            event_dict[key] = str(value)
    return event_dict


def ledger_context(ledger: LedgerConfig, caller: str | None = None) -> dict[str, Any]:
    """Context fields bound to every log line for one invocation."""
    context: dict[str, Any] = {"ledger": ledger.name, "symbol": ledger.symbol}
    if caller:
        context["caller"] = caller.lower()
    return context


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    ledger: LedgerConfig | None = None,
    caller: str | None = None,
) -> None:
    """Configure structlog processors and output routing.

    Args:
        verbose: Enable DEBUG-level output. When False, only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
        ledger: Ledger section whose name and token symbol tag each line.
        caller: Identity the invocation acts as.
    """
    kyc_level = logging.DEBUG if verbose else logging.WARNING

    structlog.contextvars.clear_contextvars()
    if ledger is not None:
        structlog.contextvars.bind_contextvars(**ledger_context(ledger, caller))

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    final_processors: list[structlog.types.Processor]
    if log_json:
        final_processors = [_exact_amounts, structlog.processors.JSONRenderer()]
    else:
        final_processors = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *final_processors,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    # Ledger and token engines log through SQLAlchemy; migrations through Alembic.
    logging.getLogger("kycpay").setLevel(kyc_level)
    logging.getLogger("alembic").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
