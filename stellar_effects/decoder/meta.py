"""
TransactionMeta decoding, versions 0 through 4.

Only ledger-entry changes feed effects. Soroban meta and contract events are
read so the buffer is fully validated, then dropped.
"""

from __future__ import annotations

from stellar_effects.decoder.ledger_entries import read_entry_changes
from stellar_effects.decoder.models import LedgerEntryChange, TransactionMeta
from stellar_effects.decoder.types import read_sc_val
from stellar_effects.decoder.xdr_reader import XdrReader

OperationChanges = tuple[LedgerEntryChange, ...]


def _read_contract_event(r: XdrReader) -> None:
    r.extension_point()
    r.optional(lambda: r.fixed_opaque(32))  # contract id
    event_type = r.int32()
    if event_type not in (0, 1, 2):
        raise r.unknown("contract event type", event_type)
    body = r.int32()
    if body != 0:
        raise r.unknown("contract event body", body)
    r.array(lambda: read_sc_val(r))  # topics
    read_sc_val(r)  # data


def _read_diagnostic_event(r: XdrReader) -> None:
    r.boolean()
    _read_contract_event(r)


def _read_transaction_event(r: XdrReader) -> None:
    r.int32()  # stage
    _read_contract_event(r)


def _read_soroban_meta_ext(r: XdrReader) -> None:
    v = r.int32()
    if v == 1:
        r.extension_point()
        r.int64()
        r.int64()
        r.int64()
    elif v != 0:
        raise r.unknown("soroban meta extension", v)


def _read_soroban_meta_v1(r: XdrReader) -> None:
    _read_soroban_meta_ext(r)
    r.array(lambda: _read_contract_event(r))
    read_sc_val(r)  # return value
    r.array(lambda: _read_diagnostic_event(r))


def _read_soroban_meta_v2(r: XdrReader) -> None:
    _read_soroban_meta_ext(r)
    r.optional(lambda: read_sc_val(r))


def _read_operation_meta_v2(r: XdrReader) -> OperationChanges:
    r.extension_point()
    changes = read_entry_changes(r)
    r.array(lambda: _read_contract_event(r))
    return changes


def read_transaction_meta(r: XdrReader) -> TransactionMeta:
    version = r.int32()
    if version == 0:
        operations = r.array(lambda: read_entry_changes(r))
        return TransactionMeta(0, (), operations)
    if version == 1:
        tx_changes = read_entry_changes(r)
        operations = r.array(lambda: read_entry_changes(r))
        return TransactionMeta(1, tx_changes, operations)
    if version == 2:
        before = read_entry_changes(r)
        operations = r.array(lambda: read_entry_changes(r))
        after = read_entry_changes(r)
        return TransactionMeta(2, before, operations, after)
    if version == 3:
        r.extension_point()
        before = read_entry_changes(r)
        operations = r.array(lambda: read_entry_changes(r))
        after = read_entry_changes(r)
        r.optional(lambda: _read_soroban_meta_v1(r))
        return TransactionMeta(3, before, operations, after)
    if version == 4:
        r.extension_point()
        before = read_entry_changes(r)
        operations = r.array(lambda: _read_operation_meta_v2(r))
        after = read_entry_changes(r)
        r.optional(lambda: _read_soroban_meta_v2(r))
        r.array(lambda: _read_transaction_event(r))
        r.array(lambda: _read_diagnostic_event(r))
        return TransactionMeta(4, before, operations, after)
    raise r.unknown("transaction meta version", version)
