"""
State diff engine: which ledger-entry changes belong to which operation.

An EntryArena turns an ordered change log into per-key timelines of
(before, after) transitions over immutable snapshots. Grouped meta (one change
group per operation) is diffed group by group. A flat log is attributed with a
footprint heuristic: each operation explains the entries owned by accounts,
pools or balances it references, plus the entry types it reaches indirectly.
When several operations explain the same key, transitions go to them in order
and the configured tie-break decides who claims a leftover one.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Sequence

from stellar_effects.decoder.models import (
    ChangeType,
    EntryKey,
    EntrySnapshot,
    EntryType,
    LedgerEntryChange,
    MuxedAccount,
    Operation,
)
from stellar_effects.decoder.operations import OperationKind
from stellar_effects.effects_logging import get_logger

logger = get_logger(__name__)

DIFF_CREATED = "created"
DIFF_UPDATED = "updated"
DIFF_REMOVED = "removed"


class TieBreak(str, Enum):
    EARLIEST = "earliest"
    LATEST = "latest"


@dataclass(frozen=True)
class EntryDiff:
    """Net change of one entry across one operation."""

    key: EntryKey
    before: EntrySnapshot | None
    after: EntrySnapshot | None

    @property
    def kind(self) -> str:
        if self.before is None:
            return DIFF_CREATED
        if self.after is None:
            return DIFF_REMOVED
        return DIFF_UPDATED

    @property
    def entry_type(self) -> EntryType:
        return self.key.entry_type

    @property
    def before_data(self) -> Any:
        return self.before.data if self.before else None

    @property
    def after_data(self) -> Any:
        return self.after.data if self.after else None


@dataclass(frozen=True)
class Transition:
    key: EntryKey
    before: EntrySnapshot | None
    after: EntrySnapshot | None
    position: int


class EntryArena:
    """Per-key timelines built from one ordered change log."""

    def __init__(self, changes: Iterable[LedgerEntryChange]) -> None:
        current: dict[EntryKey, EntrySnapshot | None] = {}
        timelines: dict[EntryKey, list[Transition]] = {}
        for position, change in enumerate(changes):
            key = change.key
            if change.change_type in (ChangeType.STATE, ChangeType.RESTORED):
                current[key] = change.snapshot
                continue
            after = None if change.change_type == ChangeType.REMOVED else change.snapshot
            before = current.get(key)
            timelines.setdefault(key, []).append(Transition(key, before, after, position))
            current[key] = after
        self._timelines = {k: tuple(v) for k, v in timelines.items()}

    def keys(self) -> list[EntryKey]:
        return sorted(self._timelines)

    def transitions(self, key: EntryKey) -> tuple[Transition, ...]:
        return self._timelines.get(key, ())


def collapse(transitions: Sequence[Transition]) -> EntryDiff | None:
    """First before, last after; None when the entry was created and removed again."""
    if not transitions:
        return None
    first, last = transitions[0], transitions[-1]
    if first.before is None and last.after is None:
        return None
    return EntryDiff(first.key, first.before, last.after)


def _sorted_diffs(diffs: Iterable[EntryDiff | None]) -> tuple[EntryDiff, ...]:
    return tuple(sorted((d for d in diffs if d is not None), key=lambda d: (int(d.key.entry_type), d.key.key_id)))


def diff_changes(changes: Iterable[LedgerEntryChange]) -> tuple[EntryDiff, ...]:
    """Diff one operation's own change group."""
    arena = EntryArena(changes)
    return _sorted_diffs(collapse(arena.transitions(k)) for k in arena.keys())


# Entry types an operation can touch without naming their owner.
_INDIRECT_ENTRY_TYPES: dict[int, frozenset[EntryType]] = {
    OperationKind.PATH_PAYMENT_STRICT_RECEIVE: frozenset({EntryType.OFFER, EntryType.LIQUIDITY_POOL}),
    OperationKind.PATH_PAYMENT_STRICT_SEND: frozenset({EntryType.OFFER, EntryType.LIQUIDITY_POOL}),
    OperationKind.MANAGE_SELL_OFFER: frozenset({EntryType.OFFER, EntryType.LIQUIDITY_POOL}),
    OperationKind.MANAGE_BUY_OFFER: frozenset({EntryType.OFFER, EntryType.LIQUIDITY_POOL}),
    OperationKind.CREATE_PASSIVE_SELL_OFFER: frozenset({EntryType.OFFER, EntryType.LIQUIDITY_POOL}),
    OperationKind.CHANGE_TRUST: frozenset({EntryType.LIQUIDITY_POOL}),
    OperationKind.ALLOW_TRUST: frozenset({EntryType.LIQUIDITY_POOL, EntryType.CLAIMABLE_BALANCE}),
    OperationKind.SET_TRUST_LINE_FLAGS: frozenset({EntryType.LIQUIDITY_POOL, EntryType.CLAIMABLE_BALANCE}),
    OperationKind.CREATE_CLAIMABLE_BALANCE: frozenset({EntryType.CLAIMABLE_BALANCE}),
    OperationKind.INFLATION: frozenset({EntryType.ACCOUNT}),
    OperationKind.INVOKE_HOST_FUNCTION: frozenset(
        {EntryType.ACCOUNT, EntryType.TRUSTLINE, EntryType.CONTRACT_DATA, EntryType.TTL}
    ),
    OperationKind.EXTEND_FOOTPRINT_TTL: frozenset({EntryType.TTL, EntryType.CONTRACT_DATA}),
    OperationKind.RESTORE_FOOTPRINT: frozenset({EntryType.TTL, EntryType.CONTRACT_DATA}),
}


def _key_owner(key_id: str) -> str:
    return key_id.split(":", 1)[0]


def _collect_refs(value: Any, refs: set[str], depth: int = 0) -> None:
    if depth > 6 or value is None:
        return
    if isinstance(value, str):
        refs.add(value)
    elif isinstance(value, MuxedAccount):
        refs.add(value.address)
    elif isinstance(value, EntryKey):
        refs.add(value.key_id)
        refs.add(_key_owner(value.key_id))
    elif isinstance(value, (tuple, list)):
        for item in value:
            _collect_refs(item, refs, depth + 1)
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        for f in dataclasses.fields(value):
            if f.name in ("asset", "selling", "buying", "send_asset", "dest_asset", "path",
                          "asset_sold", "asset_bought", "line", "args"):
                continue
            _collect_refs(getattr(value, f.name), refs, depth + 1)


def operation_footprint(operation: Operation) -> frozenset[str]:
    """Accounts, pools, balances and keys an operation names in its body or result."""
    refs: set[str] = {operation.source_address}
    _collect_refs(operation.body, refs)
    if operation.result is not None:
        _collect_refs(operation.result.payload, refs)
    if operation.kind == OperationKind.CHANGE_TRUST and operation.body.line.is_pool_share:
        refs.add(operation.body.line.liquidity_pool_id)
    return frozenset(refs)


def _explains(operation: Operation, footprint: frozenset[str], transition: Transition) -> bool:
    if transition.key.entry_type in _INDIRECT_ENTRY_TYPES.get(operation.kind, frozenset()):
        return True
    snapshot = transition.before or transition.after
    owners = {transition.key.key_id, _key_owner(transition.key.key_id)}
    if snapshot is not None:
        owners.add(snapshot.owner)
    return bool(owners & footprint)


def _pick(candidates: Sequence[int], position: int, count: int, tie_break: TieBreak) -> int:
    if tie_break == TieBreak.LATEST:
        return candidates[max(position + len(candidates) - count, 0)]
    return candidates[min(position, len(candidates) - 1)]


def attribute_flat_changes(
    changes: Sequence[LedgerEntryChange],
    operations: Sequence[Operation],
    tie_break: TieBreak = TieBreak.EARLIEST,
) -> tuple[tuple[EntryDiff, ...], ...]:
    """Split a flat change log into one diff per operation."""
    if not operations:
        return ()
    arena = EntryArena(changes)
    footprints = [operation_footprint(op) for op in operations]
    assigned: list[dict[EntryKey, list[Transition]]] = [{} for _ in operations]
    for key in arena.keys():
        transitions = arena.transitions(key)
        candidates = [
            op.index
            for op, fp in zip(operations, footprints)
            if op.successful and _explains(op, fp, transitions[0])
        ]
        if not candidates:
            candidates = [op.index for op in operations]
        for position, transition in enumerate(transitions):
            owner = _pick(candidates, position, len(transitions), tie_break)
            assigned[owner].setdefault(key, []).append(transition)
    return tuple(_sorted_diffs(collapse(t) for t in per_op.values()) for per_op in assigned)


class StateDiffEngine:
    """
    Per-transaction diff source. Grouped mode is used when the meta carries one
    change group per operation; anything else is treated as a flat log.
    """

    def __init__(
        self,
        operations: Sequence[Operation],
        operation_changes: Sequence[Sequence[LedgerEntryChange]] | None = None,
        flat_changes: Sequence[LedgerEntryChange] | None = None,
        tie_break: TieBreak = TieBreak.EARLIEST,
    ) -> None:
        self._operations = tuple(operations)
        self.tie_break = TieBreak(tie_break)
        if operation_changes is not None and len(operation_changes) == len(self._operations):
            self.grouped = True
            self._groups = tuple(tuple(g) for g in operation_changes)
            self._flat: tuple[tuple[EntryDiff, ...], ...] = ()
        else:
            self.grouped = False
            if flat_changes is None:
                flat_changes = [c for group in (operation_changes or ()) for c in group]
            self._groups = ()
            self._flat = attribute_flat_changes(list(flat_changes), self._operations, self.tie_break)
            if flat_changes:
                logger.debug(
                    "state_diff_flat_attribution",
                    operation_count=len(self._operations),
                    change_count=len(flat_changes),
                    tie_break=self.tie_break.value,
                )

    def diff_for(self, index: int) -> tuple[EntryDiff, ...]:
        if self.grouped:
            return diff_changes(self._groups[index])
        if index < len(self._flat):
            return self._flat[index]
        return ()
