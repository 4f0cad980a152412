"""
Operation walker: envelope operations paired with their results and diffs.

Envelope order is authoritative. Every operation is walked, including failed
ones (flagged successful=False, empty diff) so callers can audit them.
"""

from __future__ import annotations

from typing import Iterator

from stellar_effects.core.exceptions import ParsingError
from stellar_effects.decoder.models import Operation, Transaction
from stellar_effects.processing.state_diff import EntryDiff, StateDiffEngine, TieBreak


def pair_operations(transaction: Transaction) -> tuple[Operation, ...]:
    """
    Resolve sources and attach per-operation results by index.

    A transaction rejected before applying its operations has no results; all
    of its operations are unsuccessful. Otherwise counts must match exactly.
    """
    envelope_ops = transaction.operations
    results = transaction.result.operation_results
    if results is not None and len(results) != len(envelope_ops):
        raise ParsingError(
            f"result has {len(results)} operation results for {len(envelope_ops)} operations"
        ).with_context("payload", "result_xdr").with_context(
            "reason", "operation count mismatch"
        )
    tx_ok = transaction.successful
    paired = []
    for op in envelope_ops:
        result = results[op.index] if results is not None else None
        if result is not None and result.operation_kind is not None and result.operation_kind != int(op.kind):
            raise ParsingError(
                f"operation {op.index} is kind {int(op.kind)} but its result is kind {result.operation_kind}"
            ).with_context("payload", "result_xdr").with_context(
                "reason", "operation type mismatch"
            ).with_context("operation_index", op.index)
        paired.append(
            Operation(
                index=op.index,
                kind=op.kind,
                source_account=op.source_account or transaction.source_account,
                body=op.body,
                result=result,
                successful=bool(tx_ok and result is not None and result.successful),
            )
        )
    return tuple(paired)


class OperationWalk:
    """
    Restartable walk over (Operation, diff) pairs; each iter() starts over.
    Diffs for grouped meta are computed on demand, one operation at a time.
    """

    def __init__(self, transaction: Transaction, tie_break: TieBreak = TieBreak.EARLIEST) -> None:
        self.transaction = transaction
        self.operations = pair_operations(transaction)
        self.engine = StateDiffEngine(
            self.operations,
            operation_changes=transaction.meta.operation_changes,
            tie_break=tie_break,
        )

    def __len__(self) -> int:
        return len(self.operations)

    def __iter__(self) -> Iterator[tuple[Operation, tuple[EntryDiff, ...]]]:
        for op in self.operations:
            yield op, (self.engine.diff_for(op.index) if op.successful else ())
