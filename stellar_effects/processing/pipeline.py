"""
Per-transaction pipeline: decode -> walk -> diff -> derive -> assign ids -> emit.

Single-threaded and free of shared mutable state, so independent transactions
can run in parallel. Each operation's effects are emitted before the next
operation is derived; cancellation is checked before decoding and before each
operation. Every failure leaves as a ProcessorError carrying the transaction
hash, ledger sequence and a context mapping.
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping, Sequence

from stellar_effects.config.settings import ProcessorSettings
from stellar_effects.core.exceptions import ErrorType, ProcessingError, ProcessorError
from stellar_effects.decoder.models import Transaction
from stellar_effects.decoder.parser import decode_transaction
from stellar_effects.effects.models import EffectRecord
from stellar_effects.effects.table import derive_effects
from stellar_effects.effects_logging import bind_transaction
from stellar_effects.processing.emitter import Emitter
from stellar_effects.processing.identifiers import effect_id, operation_id
from stellar_effects.processing.state_diff import TieBreak
from stellar_effects.processing.walker import OperationWalk
from stellar_effects.processor.context import ProcessingContext
from stellar_effects.processor.messages import TransactionMessage


def _check(context: ProcessingContext | None, stage: str) -> None:
    if context is not None:
        context.check(stage)


def operation_records(
    transaction: Transaction,
    transaction_index: int = 1,
    tie_break: TieBreak = TieBreak.EARLIEST,
    context: ProcessingContext | None = None,
) -> Iterator[list[EffectRecord]]:
    """
    Yield one list of records per operation, in envelope order. Failed
    operations yield an empty list. Nothing is derived for an operation until
    the previous list has been consumed.
    """
    for op, diffs in OperationWalk(transaction, tie_break):
        _check(context, f"operation {op.index}")
        op_id = operation_id(transaction.ledger_sequence, transaction_index, op.index + 1)
        records = []
        for index, draft in enumerate(derive_effects(op, diffs)):
            records.append(
                EffectRecord(
                    address=draft.address,
                    operation_id=op_id,
                    details=draft.details,
                    effect_type=draft.effect_type,
                    closed_at=transaction.close_time,
                    ledger_sequence=transaction.ledger_sequence,
                    index=index,
                    id=effect_id(op_id, index),
                    address_muxed=draft.address_muxed,
                )
            )
        yield records


def process_transaction(
    message: TransactionMessage,
    settings: ProcessorSettings,
    consumers: Sequence[Any],
    context: ProcessingContext | None = None,
    metadata: Mapping[str, Any] | None = None,
) -> int:
    """
    Run one transaction through the pipeline and deliver its effects.
    Returns the number of effects emitted.
    """
    tx_hash = message.hash or ""
    emitter = Emitter(consumers, context, metadata)
    operations = 0
    try:
        _check(context, "decode")
        transaction = decode_transaction(
            message.envelope_xdr,
            message.result_xdr,
            message.meta_xdr,
            message.ledger_sequence,
            message.ledger_close_time,
            settings.network_passphrase,
        )
        tx_hash = message.hash or transaction.hash
        for records in operation_records(
            transaction,
            message.transaction_index,
            TieBreak(settings.attribution_tie_break),
            context,
        ):
            operations += 1
            emitter.emit_all(records)
    except ProcessorError as e:
        raise e.with_transaction(e.transaction_hash or tx_hash).with_ledger(
            e.ledger_sequence or message.ledger_sequence
        ).with_context("emitted", emitter.emitted)
    except Exception as e:
        raise ProcessingError(
            f"unexpected failure: {e}", error_type=ErrorType.SYSTEM
        ).with_transaction(tx_hash).with_ledger(message.ledger_sequence).with_context(
            "exception", type(e).__name__
        ).with_context("emitted", emitter.emitted) from e

    bind_transaction(tx_hash, message.ledger_sequence).info(
        "effects_transaction_processed",
        operations=operations,
        effects=emitter.emitted,
        fee_bump=transaction.is_fee_bump,
    )
    return emitter.emitted
