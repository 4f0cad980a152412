"""
Tests for operation ids (TOID layout) and effect ids.
"""

from __future__ import annotations

import pytest

from stellar_effects.core.exceptions import ProcessingError
from stellar_effects.processing.identifiers import (
    LEDGER_MAX,
    OPERATION_MAX,
    TRANSACTION_MAX,
    effect_id,
    operation_id,
    parse_effect_id,
    parse_operation_id,
)


def test_operation_id_layout():
    """ledger << 32 | tx << 12 | op."""
    assert operation_id(1, 1, 1) == (1 << 32) | (1 << 12) | 1
    assert operation_id(1234, 1, 1) == 5299989647361
    assert parse_operation_id(operation_id(1234, 7, 3)) == (1234, 7, 3)


def test_operation_ids_follow_chronological_order():
    ids = [
        operation_id(10, 1, 1),
        operation_id(10, 1, 2),
        operation_id(10, 2, 1),
        operation_id(11, 1, 1),
    ]
    assert ids == sorted(ids)


def test_operation_id_bounds():
    operation_id(LEDGER_MAX, TRANSACTION_MAX, OPERATION_MAX)
    for args in ((LEDGER_MAX + 1, 1, 1), (1, TRANSACTION_MAX + 1, 1), (1, 1, OPERATION_MAX + 1), (1, -1, 1)):
        with pytest.raises(ProcessingError):
            operation_id(*args)


def test_effect_id_format():
    op_id = operation_id(1234, 1, 1)
    assert effect_id(op_id, 0) == f"{op_id}-0"
    assert parse_effect_id(effect_id(op_id, 12)) == (op_id, 12)


def test_effect_id_rejects_bad_input():
    with pytest.raises(ProcessingError):
        effect_id(1, -1)
    for value in ("", "12", "12-", "-3", "a-1", "1-b"):
        with pytest.raises(ProcessingError):
            parse_effect_id(value)
