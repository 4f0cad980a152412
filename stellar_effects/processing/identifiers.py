"""
Operation and effect identifiers.

Operation ids use the TOID layout: ledger sequence in the high 32 bits,
transaction application order in the next 20, operation order in the low 12.
Numeric order of ids equals ledger chronological order.
"""

from __future__ import annotations

from stellar_effects.core.exceptions import ProcessingError

LEDGER_BITS = 32
TRANSACTION_BITS = 20
OPERATION_BITS = 12

LEDGER_MAX = (1 << (LEDGER_BITS - 1)) - 1
TRANSACTION_MAX = (1 << TRANSACTION_BITS) - 1
OPERATION_MAX = (1 << OPERATION_BITS) - 1

EFFECT_ID_SEPARATOR = "-"


def _check(name: str, value: int, maximum: int) -> None:
    if value < 0 or value > maximum:
        raise ProcessingError(f"{name} {value} out of range [0, {maximum}]").with_context(name, value)


def operation_id(ledger_sequence: int, transaction_order: int, operation_order: int) -> int:
    """
    TOID for an operation. transaction_order and operation_order are the
    1-based positions used on the ledger (operation index + 1).
    """
    _check("ledger_sequence", ledger_sequence, LEDGER_MAX)
    _check("transaction_order", transaction_order, TRANSACTION_MAX)
    _check("operation_order", operation_order, OPERATION_MAX)
    return (
        (ledger_sequence << (TRANSACTION_BITS + OPERATION_BITS))
        | (transaction_order << OPERATION_BITS)
        | operation_order
    )


def parse_operation_id(op_id: int) -> tuple[int, int, int]:
    """Inverse of operation_id: (ledger_sequence, transaction_order, operation_order)."""
    if op_id < 0:
        raise ProcessingError(f"operation id {op_id} is negative")
    return (
        op_id >> (TRANSACTION_BITS + OPERATION_BITS),
        (op_id >> OPERATION_BITS) & TRANSACTION_MAX,
        op_id & OPERATION_MAX,
    )


def effect_id(op_id: int, index: int) -> str:
    if index < 0:
        raise ProcessingError(f"effect index {index} is negative").with_context("index", index)
    return f"{op_id}{EFFECT_ID_SEPARATOR}{index}"


def parse_effect_id(value: str) -> tuple[int, int]:
    """'{operation_id}-{index}' -> (operation_id, index)."""
    op_part, sep, index_part = value.rpartition(EFFECT_ID_SEPARATOR)
    if not sep or not op_part.isdigit() or not index_part.isdigit():
        raise ProcessingError(f"malformed effect id {value!r}")
    return int(op_part), int(index_part)
