"""
Processor exceptions.

Every failure raised out of the effects pipeline is a ProcessorError carrying
an error type, a severity, and the transaction / ledger / contract context it
happened in. Callers treat them as values: the processor never lets anything
else escape.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorType(str, Enum):
    CONFIGURATION = "configuration"
    PROCESSING = "processing"
    PARSING = "parsing"
    IO = "io"
    SYSTEM = "system"


class ErrorSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ProcessorError(Exception):
    """
    Base error with structured context.

    The with_* helpers mutate and return self so context can be chained:
        raise ParsingError("bad envelope").with_transaction(h).with_ledger(seq)
    """

    default_type = ErrorType.PROCESSING
    default_severity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        error_type: ErrorType | None = None,
        severity: ErrorSeverity | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type or self.default_type
        self.severity = severity or self.default_severity
        self.transaction_hash: str = ""
        self.ledger_sequence: int = 0
        self.contract_id: str = ""
        self.context: dict[str, Any] = dict(context or {})

    def with_transaction(self, tx_hash: str | None) -> ProcessorError:
        self.transaction_hash = tx_hash or ""
        return self

    def with_ledger(self, sequence: int | None) -> ProcessorError:
        self.ledger_sequence = int(sequence or 0)
        return self

    def with_contract(self, contract_id: str | None) -> ProcessorError:
        self.contract_id = contract_id or ""
        return self

    def with_context(self, key: str, value: Any) -> ProcessorError:
        self.context[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "error_type": self.error_type.value,
            "severity": self.severity.value,
            "transaction_hash": self.transaction_hash,
            "ledger_sequence": self.ledger_sequence,
            "contract_id": self.contract_id,
            "context": dict(self.context),
        }

    def __str__(self) -> str:
        return (
            f"[{self.error_type.value}:{self.severity.value}] {self.message} "
            f"(tx: {self.transaction_hash}, ledger: {self.ledger_sequence}, "
            f"contract: {self.contract_id}, context: {self.context})"
        )


class ParsingError(ProcessorError):
    """Malformed or missing input payload; no effects are emitted for the transaction."""

    default_type = ErrorType.PARSING


class ProcessingError(ProcessorError):
    """Internal invariant violation while deriving or identifying effects."""

    default_type = ErrorType.PROCESSING


class EffectsIOError(ProcessorError):
    """Delivery of an already-derived effect to a consumer failed."""

    default_type = ErrorType.IO


class ConfigurationError(ProcessorError):
    """Missing or invalid processor setup, raised before any transaction is processed."""

    default_type = ErrorType.CONFIGURATION


class ProcessingCancelled(ProcessorError):
    """The caller's cancellation signal was observed."""

    default_type = ErrorType.PROCESSING
    default_severity = ErrorSeverity.WARNING
