"""
TransactionEnvelope decoding (v0, v1 and fee-bump).

Besides the structured envelope, the reader captures the tagged transaction
bytes needed for the transaction hash: sha256(network_id || envelope type || tx).
"""

from __future__ import annotations

import base64
import struct
from dataclasses import dataclass, replace
from typing import Any

from stellar_effects.decoder.ledger_entries import read_ledger_key
from stellar_effects.decoder.models import EnvelopeOperation, MuxedAccount
from stellar_effects.decoder.operations import SOROBAN_OPERATION_KINDS, read_operation
from stellar_effects.decoder.types import read_ed25519, read_muxed_account, read_signer_key
from stellar_effects.decoder.xdr_reader import XdrReader
from stellar_effects.utils import strkey

ENVELOPE_TYPE_TX_V0 = 0
ENVELOPE_TYPE_TX = 2
ENVELOPE_TYPE_TX_FEE_BUMP = 5

MAX_OPERATIONS = 100
MAX_SIGNATURES = 20

MEMO_NONE = 0
MEMO_TEXT = 1
MEMO_ID = 2
MEMO_HASH = 3
MEMO_RETURN = 4


@dataclass(frozen=True)
class Memo:
    memo_type: str
    value: Any = None


@dataclass(frozen=True)
class DecodedEnvelope:
    envelope_type: int
    source_account: MuxedAccount
    operations: tuple[EnvelopeOperation, ...]
    sequence: int
    memo: Memo
    signature_payload: bytes
    is_fee_bump: bool = False
    fee_source: MuxedAccount | None = None
    footprint_read_only: tuple[str, ...] = ()
    footprint_read_write: tuple[str, ...] = ()


def _read_time_bounds(r: XdrReader) -> tuple[int, int]:
    return r.uint64(), r.uint64()


def _read_preconditions(r: XdrReader) -> None:
    kind = r.int32()
    if kind == 0:
        return
    if kind == 1:
        _read_time_bounds(r)
        return
    if kind == 2:
        r.optional(lambda: _read_time_bounds(r))
        r.optional(lambda: (r.uint32(), r.uint32()))  # ledger bounds
        r.optional(r.int64)  # minSeqNum
        r.uint64()  # minSeqAge
        r.uint32()  # minSeqLedgerGap
        r.array(lambda: read_signer_key(r), 2)
        return
    raise r.unknown("preconditions", kind)


def _read_memo(r: XdrReader) -> Memo:
    kind = r.int32()
    if kind == MEMO_NONE:
        return Memo("none")
    if kind == MEMO_TEXT:
        return Memo("text", r.string(28))
    if kind == MEMO_ID:
        return Memo("id", r.uint64())
    if kind == MEMO_HASH:
        return Memo("hash", r.fixed_opaque(32).hex())
    if kind == MEMO_RETURN:
        return Memo("return", r.fixed_opaque(32).hex())
    raise r.unknown("memo", kind)


def _read_ledger_key_b64(r: XdrReader) -> str:
    """Footprint keys are kept as base64 XDR, the form Horizon reports them in."""
    start = r.offset
    read_ledger_key(r)
    return base64.b64encode(r.slice(start)).decode("ascii")


def _read_soroban_data(r: XdrReader) -> tuple[tuple[str, ...], tuple[str, ...]]:
    ext = r.int32()
    if ext == 1:
        r.array(r.uint32)  # archived soroban entries
    elif ext != 0:
        raise r.unknown("soroban data extension", ext)
    read_only = r.array(lambda: _read_ledger_key_b64(r))
    read_write = r.array(lambda: _read_ledger_key_b64(r))
    r.uint32()  # instructions
    r.uint32()  # disk read bytes
    r.uint32()  # write bytes
    r.int64()  # resource fee
    return read_only, read_write


def _read_signatures(r: XdrReader) -> None:
    r.array(lambda: (r.fixed_opaque(4), r.var_opaque(64)), MAX_SIGNATURES)


def _attach_footprint(
    operations: tuple[EnvelopeOperation, ...],
    read_only: tuple[str, ...],
    read_write: tuple[str, ...],
) -> tuple[EnvelopeOperation, ...]:
    if not read_only and not read_write:
        return operations
    out = []
    for op in operations:
        if op.kind in SOROBAN_OPERATION_KINDS:
            body = replace(op.body, footprint_read_only=read_only, footprint_read_write=read_write)
            op = replace(op, body=body)
        out.append(op)
    return tuple(out)


def _read_operations(r: XdrReader) -> tuple[EnvelopeOperation, ...]:
    count = r.uint32()
    if count > MAX_OPERATIONS:
        raise r.error(f"operation count {count} exceeds limit {MAX_OPERATIONS}")
    return tuple(read_operation(r, i) for i in range(count))


def _read_transaction_v1(r: XdrReader) -> DecodedEnvelope:
    start = r.offset
    source = read_muxed_account(r)
    r.uint32()  # fee
    sequence = r.int64()
    _read_preconditions(r)
    memo = _read_memo(r)
    operations = _read_operations(r)
    read_only: tuple[str, ...] = ()
    read_write: tuple[str, ...] = ()
    ext = r.int32()
    if ext == 1:
        read_only, read_write = _read_soroban_data(r)
    elif ext != 0:
        raise r.unknown("transaction extension", ext)
    tx_bytes = r.slice(start)
    _read_signatures(r)
    return DecodedEnvelope(
        envelope_type=ENVELOPE_TYPE_TX,
        source_account=source,
        operations=_attach_footprint(operations, read_only, read_write),
        sequence=sequence,
        memo=memo,
        signature_payload=struct.pack(">i", ENVELOPE_TYPE_TX) + tx_bytes,
        footprint_read_only=read_only,
        footprint_read_write=read_write,
    )


def _read_transaction_v0(r: XdrReader) -> DecodedEnvelope:
    start = r.offset
    source = MuxedAccount(strkey.encode_account_id(read_ed25519(r)))
    r.uint32()  # fee
    sequence = r.int64()
    r.optional(lambda: _read_time_bounds(r))
    memo = _read_memo(r)
    operations = _read_operations(r)
    r.extension_point()
    tx_bytes = r.slice(start)
    _read_signatures(r)
    # A v0 transaction hashes as the equivalent v1 transaction: same bytes once
    # the bare source key gets the KEY_TYPE_ED25519 tag (the optional time-bounds
    # flag lines up with PRECOND_NONE / PRECOND_TIME).
    payload = struct.pack(">ii", ENVELOPE_TYPE_TX, 0) + tx_bytes
    return DecodedEnvelope(
        envelope_type=ENVELOPE_TYPE_TX_V0,
        source_account=source,
        operations=operations,
        sequence=sequence,
        memo=memo,
        signature_payload=payload,
    )


def _read_fee_bump(r: XdrReader) -> DecodedEnvelope:
    start = r.offset
    fee_source = read_muxed_account(r)
    r.int64()  # fee
    inner_type = r.int32()
    if inner_type != ENVELOPE_TYPE_TX:
        raise r.unknown("fee bump inner transaction", inner_type)
    inner = _read_transaction_v1(r)
    r.extension_point()
    tx_bytes = r.slice(start)
    _read_signatures(r)
    return replace(
        inner,
        envelope_type=ENVELOPE_TYPE_TX_FEE_BUMP,
        is_fee_bump=True,
        fee_source=fee_source,
        signature_payload=struct.pack(">i", ENVELOPE_TYPE_TX_FEE_BUMP) + tx_bytes,
    )


def read_envelope(r: XdrReader) -> DecodedEnvelope:
    envelope_type = r.int32()
    if envelope_type == ENVELOPE_TYPE_TX_V0:
        return _read_transaction_v0(r)
    if envelope_type == ENVELOPE_TYPE_TX:
        return _read_transaction_v1(r)
    if envelope_type == ENVELOPE_TYPE_TX_FEE_BUMP:
        return _read_fee_bump(r)
    raise r.unknown("envelope type", envelope_type)
