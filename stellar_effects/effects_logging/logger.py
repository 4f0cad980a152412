"""
Structured logging for the effects processor.

Every line carries timestamp, level, logger and event_type, plus whatever the
call site binds: tx_hash and ledger_sequence for per-transaction events,
effect_id and consumer for delivery failures. Lines go to stderr so the CLI
can keep stdout for effect records.

Importing this module configures structlog unless the host already did.
No stellar_effects imports here; every other module imports this one.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()


def _event_type(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog's 'event' becomes event_type; message mirrors it when unset."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "event_type" in event_dict:
        event_dict.setdefault("message", str(event_dict["event_type"]))
    return event_dict


def configure_structlog(level: str | None = None, fmt: str | None = None) -> None:
    """(Re)configure structlog; level and fmt default to LOG_LEVEL / LOG_FORMAT."""
    level_value = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    if (fmt or LOG_FORMAT) == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
            _event_type,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Logger bound to the module name.

        logger = get_logger(__name__)
        logger.info("effects_transaction_processed", operations=2, effects=5)
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_transaction(tx_hash: str, ledger_sequence: int | None = None) -> structlog.BoundLogger:
    """Logger with tx_hash (and ledger_sequence when known) bound."""
    logger = get_logger("stellar_effects").bind(tx_hash=tx_hash)
    if ledger_sequence is not None:
        logger = logger.bind(ledger_sequence=ledger_sequence)
    return logger
