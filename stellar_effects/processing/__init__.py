"""
Transaction processing: operation walker, state diff engine and identifiers.

The per-transaction pipeline lives in stellar_effects.processing.pipeline and
the emitter in stellar_effects.processing.emitter.
"""

from stellar_effects.processing.identifiers import effect_id, operation_id, parse_effect_id
from stellar_effects.processing.state_diff import EntryDiff, StateDiffEngine, TieBreak
from stellar_effects.processing.walker import OperationWalk, pair_operations

__all__ = [
    "EntryDiff",
    "OperationWalk",
    "StateDiffEngine",
    "TieBreak",
    "effect_id",
    "operation_id",
    "pair_operations",
    "parse_effect_id",
]
