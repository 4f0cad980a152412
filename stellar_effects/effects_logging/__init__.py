"""
Structured logging for the effects processor. Importing this package configures structlog.
"""

from stellar_effects.effects_logging.logger import (  # noqa: F401
    bind_transaction,
    configure_structlog,
    get_logger,
)

__all__ = ["bind_transaction", "configure_structlog", "get_logger"]
