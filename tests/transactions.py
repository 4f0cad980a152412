"""
Ready-made transaction messages for pipeline and processor tests.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone

import xdr_builders as xb

from stellar_effects.processor.messages import Message

LEDGER = 1234
CLOSE_TIME = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
CLOSE_TIME_TEXT = "2024-01-02T03:04:05Z"

SOURCE = 1
DEST = 2
ISSUER = 3


def transaction_message(envelope: bytes, result: bytes, meta: bytes | None, **extra) -> Message:
    """Input Message for the processor; meta=None leaves meta_xdr out entirely."""
    data = {
        "envelope_xdr": xb.b64(envelope),
        "result_xdr": xb.b64(result),
        "ledger_sequence": LEDGER,
        "ledger_close_time": CLOSE_TIME_TEXT,
    }
    if meta is not None:
        data["meta_xdr"] = xb.b64(meta)
    data.update(extra)
    return Message(payload=json.dumps(data).encode("utf-8"), metadata={"source": "test"})


def payment_transaction(op_count: int = 1, code: str = "USD") -> Message:
    """SOURCE pays DEST `op_count` times in a credit asset, with trustline changes per operation."""
    usd = xb.asset(code, ISSUER)
    ops = [xb.payment_op(xb.muxed_account(DEST), usd, 10_0000000) for _ in range(op_count)]
    tx = xb.transaction(xb.muxed_account(SOURCE), ops)
    groups = []
    for i in range(op_count):
        groups.append(
            [
                xb.state(xb.trustline_entry(SOURCE, usd, 100_0000000 - i * 10_0000000)),
                xb.updated(xb.trustline_entry(SOURCE, usd, 90_0000000 - i * 10_0000000)),
                xb.state(xb.trustline_entry(DEST, usd, i * 10_0000000)),
                xb.updated(xb.trustline_entry(DEST, usd, (i + 1) * 10_0000000)),
            ]
        )
    result = xb.result_pair([xb.op_result(1) for _ in range(op_count)])
    return transaction_message(xb.envelope_v1(tx), result, xb.meta_v2(groups))


def create_account_transaction() -> Message:
    tx = xb.transaction(xb.muxed_account(SOURCE), [xb.create_account_op(DEST, 100_0000000)])
    meta = xb.meta_v2(
        [
            [
                xb.created(xb.account_entry(DEST, 100_0000000)),
                xb.state(xb.account_entry(SOURCE, 1000_0000000)),
                xb.updated(xb.account_entry(SOURCE, 900_0000000)),
            ]
        ]
    )
    return transaction_message(xb.envelope_v1(tx), xb.result_pair([xb.op_result(0)]), meta)

