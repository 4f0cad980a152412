"""
Trustline derivations: change_trust, allow_trust, set_trust_line_flags and
the pool-share revocation that deauthorizing a trustline triggers.
"""

from __future__ import annotations

from stellar_effects.decoder.ledger_entries import trustline_key_id
from stellar_effects.decoder.models import (
    TRUSTLINE_AUTHORIZED,
    TRUSTLINE_AUTHORIZED_TO_MAINTAIN_LIABILITIES,
    TRUSTLINE_CLAWBACK_ENABLED,
    EntryType,
    Operation,
)
from stellar_effects.effects.common import Diffs, diffs_of, find_diff
from stellar_effects.effects.details import (
    AssetAmount,
    LiquidityPoolRevokedDetails,
    TrustlineDetails,
    TrustlineFlagsDetails,
)
from stellar_effects.effects.effect_types import EffectType
from stellar_effects.effects.models import EffectDraft
from stellar_effects.processing.state_diff import DIFF_CREATED, DIFF_REMOVED, DIFF_UPDATED

_FLAG_FIELDS = (
    (TRUSTLINE_AUTHORIZED, "authorized"),
    (TRUSTLINE_AUTHORIZED_TO_MAINTAIN_LIABILITIES, "authorized_to_maintain_liabilities"),
    (TRUSTLINE_CLAWBACK_ENABLED, "clawback_enabled"),
)


def trustline_flag_effects(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    """trustline_flags_updated for every asset trustline whose flags moved; only changed flags are reported."""
    drafts = []
    for diff in diffs_of(diffs, EntryType.TRUSTLINE):
        if diff.kind != DIFF_UPDATED:
            continue
        before, after = diff.before_data, diff.after_data
        if after.asset.is_pool_share or before.flags == after.flags:
            continue
        changed = {
            name: bool(after.flags & bit)
            for bit, name in _FLAG_FIELDS
            if (before.flags & bit) != (after.flags & bit)
        }
        details = TrustlineFlagsDetails(trustor=after.account_id, asset=after.asset, **changed)
        drafts.append(EffectDraft.for_account(EffectType.TRUSTLINE_FLAGS_UPDATED, op.source_account, details))
    return drafts


def change_trust(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    line = op.body.line
    diff = find_diff(diffs, EntryType.TRUSTLINE, trustline_key_id(op.source_address, line.canonical()))
    drafts = []
    if diff is not None:
        if diff.kind == DIFF_CREATED:
            effect_type = EffectType.TRUSTLINE_CREATED
        elif diff.kind == DIFF_REMOVED:
            effect_type = EffectType.TRUSTLINE_REMOVED
        else:
            effect_type = EffectType.TRUSTLINE_UPDATED
        drafts.append(
            EffectDraft.for_account(effect_type, op.source_account, TrustlineDetails(line, op.body.limit))
        )
    return drafts + trustline_flag_effects(op, diffs)


def _revoked_reserves(pool, diffs: Diffs) -> tuple[AssetAmount, ...]:
    """Reserves returned to the owner as claimable balances, matched by asset."""
    created = [d.after_data for d in diffs_of(diffs, EntryType.CLAIMABLE_BALANCE) if d.kind == DIFF_CREATED]
    reserves = []
    for asset in (pool.asset_a, pool.asset_b):
        for balance in created:
            if balance.asset.canonical() == asset.canonical():
                reserves.append(AssetAmount(asset, balance.amount, balance.balance_id))
                break
    return tuple(reserves)


def pool_revocations(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    drafts = []
    for diff in diffs_of(diffs, EntryType.LIQUIDITY_POOL):
        if diff.kind == DIFF_CREATED:
            continue
        before = diff.before_data
        pool = diff.after_data or before
        remaining = diff.after_data.total_shares if diff.after_data else 0
        details = LiquidityPoolRevokedDetails(
            pool=pool,
            reserves_revoked=_revoked_reserves(pool, diffs),
            shares_revoked=before.total_shares - remaining,
        )
        drafts.append(EffectDraft.for_account(EffectType.LIQUIDITY_POOL_REVOKED, op.source_account, details))
    return drafts


def trust_authorization(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    """allow_trust and set_trust_line_flags."""
    return trustline_flag_effects(op, diffs) + pool_revocations(op, diffs)
