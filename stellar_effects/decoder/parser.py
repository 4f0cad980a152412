"""
Decode the three base64 XDR payloads of a transaction into one Transaction.

Pure and side-effect free: the same inputs always give an equal Transaction.
Any failure is a ParsingError whose context names the payload and the reason.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
from datetime import datetime
from typing import Callable, TypeVar

from stellar_effects.core.exceptions import ParsingError
from stellar_effects.decoder.envelope import read_envelope
from stellar_effects.decoder.meta import read_transaction_meta
from stellar_effects.decoder.models import Transaction
from stellar_effects.decoder.results import read_transaction_result_pair
from stellar_effects.decoder.xdr_reader import XdrDecodeError, XdrReader

T = TypeVar("T")

ENVELOPE_PAYLOAD = "envelope_xdr"
RESULT_PAYLOAD = "result_xdr"
META_PAYLOAD = "meta_xdr"


def network_id(network_passphrase: str) -> bytes:
    return hashlib.sha256(network_passphrase.encode("utf-8")).digest()


def _decode_payload(name: str, text: str | None, read: Callable[[XdrReader], T]) -> T:
    if text is None or (isinstance(text, str) and not text.strip()):
        raise ParsingError(f"missing {name}").with_context("payload", name).with_context(
            "reason", "missing"
        )
    try:
        raw = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError, TypeError) as e:
        raise ParsingError(f"{name} is not valid base64: {e}").with_context(
            "payload", name
        ).with_context("reason", "malformed encoding") from e
    reader = XdrReader(raw)
    try:
        value = read(reader)
        reader.done()
    except XdrDecodeError as e:
        raise ParsingError(f"{name}: {e}").with_context("payload", name).with_context(
            "reason", e.reason
        ).with_context("offset", e.offset) from e
    return value


def decode_transaction(
    envelope_xdr: str | None,
    result_xdr: str | None,
    meta_xdr: str | None,
    ledger_sequence: int,
    close_time: datetime,
    network_passphrase: str,
) -> Transaction:
    """
    Build a Transaction from envelope, result pair and meta (all mandatory).

    The transaction hash is computed from the envelope under the given network;
    for fee-bump envelopes it is the outer (fee-bump) hash while the inner
    transaction supplies the source account and operations.
    """
    envelope = _decode_payload(ENVELOPE_PAYLOAD, envelope_xdr, read_envelope)
    _, result = _decode_payload(RESULT_PAYLOAD, result_xdr, read_transaction_result_pair)
    meta = _decode_payload(META_PAYLOAD, meta_xdr, read_transaction_meta)

    tx_hash = hashlib.sha256(network_id(network_passphrase) + envelope.signature_payload).hexdigest()
    return Transaction(
        hash=tx_hash,
        source_account=envelope.source_account,
        operations=envelope.operations,
        result=result,
        meta=meta,
        ledger_sequence=int(ledger_sequence),
        close_time=close_time,
        network_passphrase=network_passphrase,
        is_fee_bump=envelope.is_fee_bump,
        fee_source=envelope.fee_source,
        sequence=envelope.sequence,
        memo=envelope.memo,
        footprint_read_only=envelope.footprint_read_only,
        footprint_read_write=envelope.footprint_read_write,
    )
