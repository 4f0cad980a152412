"""
Tests for decode_transaction: envelopes, results, meta and the error paths.
"""

from __future__ import annotations

import pytest

import xdr_builders as xb
from stellar_effects.config.env import PUBLIC_NETWORK_PASSPHRASE, TESTNET_NETWORK_PASSPHRASE
from stellar_effects.core.exceptions import ParsingError
from stellar_effects.decoder import OperationKind, decode_transaction
from stellar_effects.decoder.models import ChangeType, EntryType
from transactions import CLOSE_TIME, DEST, ISSUER, LEDGER, SOURCE

USD = xb.asset("USD", ISSUER)


def _payment_tx(source=None):
    source = source if source is not None else xb.muxed_account(SOURCE)
    return xb.transaction(source, [xb.payment_op(xb.muxed_account(DEST), USD, 5_0000000)])


def _meta():
    return xb.meta_v2(
        [
            [
                xb.state(xb.trustline_entry(SOURCE, USD, 10_0000000)),
                xb.updated(xb.trustline_entry(SOURCE, USD, 5_0000000)),
            ]
        ]
    )


def _decode(envelope: bytes, result: bytes, meta: bytes, passphrase: str = TESTNET_NETWORK_PASSPHRASE):
    return decode_transaction(
        xb.b64(envelope), xb.b64(result), xb.b64(meta), LEDGER, CLOSE_TIME, passphrase
    )


def test_decode_payment():
    tx = _payment_tx()
    decoded = _decode(xb.envelope_v1(tx), xb.result_pair([xb.op_result(1)]), _meta())
    assert decoded.hash == xb.network_hash(TESTNET_NETWORK_PASSPHRASE, 2, tx)
    assert decoded.source_account.address == xb.address(SOURCE)
    assert decoded.ledger_sequence == LEDGER
    assert decoded.close_time == CLOSE_TIME
    assert decoded.successful
    assert not decoded.is_fee_bump

    (op,) = decoded.operations
    assert op.kind == OperationKind.PAYMENT
    assert op.source_account is None
    assert op.body.destination.address == xb.address(DEST)
    assert op.body.asset.canonical() == f"USD:{xb.address(ISSUER)}"
    assert op.body.amount == 5_0000000

    (group,) = decoded.meta.operation_changes
    assert [c.change_type for c in group] == [ChangeType.STATE, ChangeType.UPDATED]
    assert group[1].key.entry_type == EntryType.TRUSTLINE
    assert group[1].snapshot.data.balance == 5_0000000


def test_hash_depends_on_network():
    tx = _payment_tx()
    args = (xb.envelope_v1(tx), xb.result_pair([xb.op_result(1)]), _meta())
    assert _decode(*args).hash != _decode(*args, passphrase=PUBLIC_NETWORK_PASSPHRASE).hash


def test_decode_is_deterministic():
    args = (xb.envelope_v1(_payment_tx()), xb.result_pair([xb.op_result(1)]), _meta())
    assert _decode(*args) == _decode(*args)


def test_muxed_source_account():
    decoded = _decode(
        xb.envelope_v1(_payment_tx(xb.muxed_account(SOURCE, muxed_id=99))),
        xb.result_pair([xb.op_result(1)]),
        _meta(),
    )
    assert decoded.source_account.address == xb.address(SOURCE)
    assert decoded.source_account.muxed_id == 99
    assert decoded.source_account.muxed_address.startswith("M")


def test_v0_envelope_hashes_as_v1():
    ops = [xb.payment_op(xb.muxed_account(DEST), USD, 5_0000000)]
    decoded = _decode(xb.envelope_v0(xb.key(SOURCE), ops), xb.result_pair([xb.op_result(1)]), _meta())
    v1_tx = xb.transaction(xb.muxed_account(SOURCE), ops)
    assert decoded.hash == xb.network_hash(TESTNET_NETWORK_PASSPHRASE, 2, v1_tx)
    assert decoded.source_account.address == xb.address(SOURCE)


def test_fee_bump_envelope():
    """Outer hash, inner source and operations, fee source kept separately."""
    inner = _payment_tx()
    fee_source = xb.muxed_account(4)
    decoded = _decode(
        xb.envelope_fee_bump(fee_source, inner),
        xb.fee_bump_result_pair([xb.op_result(1)]),
        _meta(),
    )
    assert decoded.is_fee_bump
    assert decoded.hash == xb.network_hash(TESTNET_NETWORK_PASSPHRASE, 5, xb.fee_bump_body(fee_source, inner))
    assert decoded.source_account.address == xb.address(SOURCE)
    assert decoded.fee_source.address == xb.address(4)
    assert decoded.successful
    assert len(decoded.result.operation_results) == 1


def test_failed_transaction_result():
    decoded = _decode(
        xb.envelope_v1(_payment_tx()),
        xb.result_pair([xb.op_result(1, code=-2)], code=-1),
        xb.meta_v2([[]]),
    )
    assert not decoded.successful
    assert not decoded.result.operation_results[0].successful


def test_meta_v3():
    decoded = _decode(
        xb.envelope_v1(_payment_tx()),
        xb.result_pair([xb.op_result(1)]),
        xb.meta_v3([[xb.state(xb.trustline_entry(SOURCE, USD, 1)), xb.updated(xb.trustline_entry(SOURCE, USD, 2))]]),
    )
    assert decoded.meta.version == 3
    assert len(decoded.meta.operation_changes[0]) == 2


@pytest.mark.parametrize("missing", ["envelope_xdr", "result_xdr", "meta_xdr"])
def test_missing_payload(missing):
    payloads = {
        "envelope_xdr": xb.b64(xb.envelope_v1(_payment_tx())),
        "result_xdr": xb.b64(xb.result_pair([xb.op_result(1)])),
        "meta_xdr": xb.b64(_meta()),
    }
    payloads[missing] = ""
    with pytest.raises(ParsingError) as exc:
        decode_transaction(
            payloads["envelope_xdr"],
            payloads["result_xdr"],
            payloads["meta_xdr"],
            LEDGER,
            CLOSE_TIME,
            TESTNET_NETWORK_PASSPHRASE,
        )
    assert exc.value.context["payload"] == missing
    assert exc.value.context["reason"] == "missing"


def test_bad_base64():
    with pytest.raises(ParsingError) as exc:
        decode_transaction(
            "not base64!!", xb.b64(xb.result_pair([])), xb.b64(xb.meta_v2([])), LEDGER, CLOSE_TIME,
            TESTNET_NETWORK_PASSPHRASE,
        )
    assert exc.value.context["payload"] == "envelope_xdr"
    assert exc.value.context["reason"] == "malformed encoding"


def test_unknown_envelope_type():
    with pytest.raises(ParsingError) as exc:
        _decode(xb.i32(7) + _payment_tx(), xb.result_pair([xb.op_result(1)]), _meta())
    assert exc.value.context["payload"] == "envelope_xdr"
    assert "envelope type" in exc.value.context["reason"]
    assert exc.value.context["offset"] == 4


def test_truncated_meta():
    meta = _meta()
    with pytest.raises(ParsingError) as exc:
        _decode(xb.envelope_v1(_payment_tx()), xb.result_pair([xb.op_result(1)]), meta[:-6])
    assert exc.value.context["payload"] == "meta_xdr"
    assert "truncated" in exc.value.context["reason"]


def test_trailing_bytes_in_result():
    with pytest.raises(ParsingError) as exc:
        _decode(xb.envelope_v1(_payment_tx()), xb.result_pair([xb.op_result(1)]) + xb.u32(0), _meta())
    assert exc.value.context["payload"] == "result_xdr"
