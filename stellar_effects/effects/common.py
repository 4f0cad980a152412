"""Helpers shared by the per-family derivation modules."""

from __future__ import annotations

from typing import Callable, Sequence, TypeVar

from stellar_effects.core.exceptions import ProcessingError
from stellar_effects.decoder.models import Asset, EntryType, MuxedAccount, Operation
from stellar_effects.effects.details import BalanceChangeDetails
from stellar_effects.effects.effect_types import EffectType
from stellar_effects.effects.models import EffectDraft
from stellar_effects.processing.state_diff import EntryDiff

T = TypeVar("T")

Diffs = Sequence[EntryDiff]
DerivationFn = Callable[[Operation, Diffs], list[EffectDraft]]


def diffs_of(diffs: Diffs, entry_type: EntryType) -> list[EntryDiff]:
    return [d for d in diffs if d.key.entry_type == entry_type]


def find_diff(diffs: Diffs, entry_type: EntryType, key_id: str) -> EntryDiff | None:
    for d in diffs:
        if d.key.entry_type == entry_type and d.key.key_id == key_id:
            return d
    return None


def success_payload(op: Operation, expected: type[T]) -> T:
    """The result's success arm; its absence on a successful operation is an invariant violation."""
    payload = op.result.payload if op.result is not None else None
    if not isinstance(payload, expected):
        raise ProcessingError(
            f"operation {op.index} has no {expected.__name__} in its result"
        ).with_context("operation_index", op.index).with_context("operation_type", int(op.kind))
    return payload


def require_diff(op: Operation, diffs: Diffs, entry_type: EntryType, key_id: str) -> EntryDiff:
    diff = find_diff(diffs, entry_type, key_id)
    if diff is None:
        raise ProcessingError(
            f"operation {op.index} changed no {entry_type.name.lower()} entry {key_id}"
        ).with_context("operation_index", op.index).with_context("key_id", key_id)
    return diff


def debit(account: MuxedAccount, asset: Asset, amount: int) -> EffectDraft:
    return EffectDraft.for_account(EffectType.ACCOUNT_DEBITED, account, BalanceChangeDetails(asset, amount))


def credit(account: MuxedAccount, asset: Asset, amount: int) -> EffectDraft:
    return EffectDraft.for_account(EffectType.ACCOUNT_CREDITED, account, BalanceChangeDetails(asset, amount))


def no_effects(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    """Operations whose only effects come from the shared sponsorship / pool passes."""
    return []
