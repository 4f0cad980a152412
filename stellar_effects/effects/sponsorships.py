"""
Sponsorship pass: compares the sponsor recorded on each changed entry (and on
each account signer) before and after the operation.
"""

from __future__ import annotations

from stellar_effects.decoder.models import EntryType, MuxedAccount, Operation
from stellar_effects.effects.common import Diffs, diffs_of
from stellar_effects.effects.details import SponsorshipDetails
from stellar_effects.effects.effect_types import EffectType
from stellar_effects.effects.models import EffectDraft
from stellar_effects.processing.state_diff import EntryDiff

# entry type -> (created, updated, removed)
_SPONSORSHIP_TYPES = {
    EntryType.ACCOUNT: (
        EffectType.ACCOUNT_SPONSORSHIP_CREATED,
        EffectType.ACCOUNT_SPONSORSHIP_UPDATED,
        EffectType.ACCOUNT_SPONSORSHIP_REMOVED,
    ),
    EntryType.TRUSTLINE: (
        EffectType.TRUSTLINE_SPONSORSHIP_CREATED,
        EffectType.TRUSTLINE_SPONSORSHIP_UPDATED,
        EffectType.TRUSTLINE_SPONSORSHIP_REMOVED,
    ),
    EntryType.DATA: (
        EffectType.DATA_SPONSORSHIP_CREATED,
        EffectType.DATA_SPONSORSHIP_UPDATED,
        EffectType.DATA_SPONSORSHIP_REMOVED,
    ),
    EntryType.CLAIMABLE_BALANCE: (
        EffectType.CLAIMABLE_BALANCE_SPONSORSHIP_CREATED,
        EffectType.CLAIMABLE_BALANCE_SPONSORSHIP_UPDATED,
        EffectType.CLAIMABLE_BALANCE_SPONSORSHIP_REMOVED,
    ),
}

_SIGNER_TYPES = (
    EffectType.SIGNER_SPONSORSHIP_CREATED,
    EffectType.SIGNER_SPONSORSHIP_UPDATED,
    EffectType.SIGNER_SPONSORSHIP_REMOVED,
)


def _transition(before: str | None, after: str | None, types: tuple[EffectType, ...]):
    """(effect type, sponsor fields) for a sponsor change, or None when unchanged."""
    created, updated, removed = types
    if before == after:
        return None
    if before is None:
        return created, {"sponsor": after}
    if after is None:
        return removed, {"former_sponsor": before}
    return updated, {"former_sponsor": before, "new_sponsor": after}


def _subject(op: Operation, diff: EntryDiff) -> tuple[MuxedAccount, dict]:
    """Effect address and the fields identifying the sponsored entry."""
    data = diff.after_data or diff.before_data
    if diff.entry_type == EntryType.ACCOUNT:
        return MuxedAccount(data.account_id), {}
    if diff.entry_type == EntryType.TRUSTLINE:
        if data.asset.is_pool_share:
            fields = {"asset_type": "liquidity_pool", "liquidity_pool_id": data.asset.liquidity_pool_id}
        else:
            fields = {"asset": data.asset.canonical()}
        return MuxedAccount(data.account_id), fields
    if diff.entry_type == EntryType.DATA:
        return MuxedAccount(data.account_id), {"data_name": data.name}
    return op.source_account, {"balance_id": data.balance_id}


def entry_sponsorship_effects(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    drafts = []
    for diff in diffs:
        types = _SPONSORSHIP_TYPES.get(diff.entry_type)
        if types is None:
            continue
        before = diff.before.sponsor if diff.before else None
        after = diff.after.sponsor if diff.after else None
        change = _transition(before, after, types)
        if change is None:
            continue
        effect_type, sponsors = change
        address, fields = _subject(op, diff)
        drafts.append(EffectDraft.for_account(effect_type, address, SponsorshipDetails(**sponsors, **fields)))
    return drafts


def signer_sponsorship_effects(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    drafts = []
    for diff in diffs_of(diffs, EntryType.ACCOUNT):
        old = diff.before_data.signer_sponsors() if diff.before else {}
        new = diff.after_data.signer_sponsors() if diff.after else {}
        for signer in sorted(set(old) | set(new)):
            change = _transition(old.get(signer), new.get(signer), _SIGNER_TYPES)
            if change is None:
                continue
            effect_type, sponsors = change
            details = SponsorshipDetails(signer=signer, **sponsors)
            drafts.append(EffectDraft.for_account(effect_type, op.source_account, details))
    return drafts


def sponsorship_effects(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    return entry_sponsorship_effects(op, diffs) + signer_sponsorship_effects(op, diffs)
