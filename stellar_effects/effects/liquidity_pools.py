"""
Liquidity pool deposit / withdraw, and the created / removed pass that runs
after every operation's own effects.
"""

from __future__ import annotations

from stellar_effects.decoder.models import EntryType, Operation
from stellar_effects.effects.common import Diffs, diffs_of, require_diff
from stellar_effects.effects.details import (
    AssetAmount,
    LiquidityPoolDepositedDetails,
    LiquidityPoolDetails,
    LiquidityPoolRemovedDetails,
    LiquidityPoolWithdrewDetails,
)
from stellar_effects.effects.effect_types import EffectType
from stellar_effects.effects.models import EffectDraft
from stellar_effects.processing.state_diff import DIFF_CREATED, DIFF_REMOVED


def _pool_diff(op: Operation, diffs: Diffs):
    diff = require_diff(op, diffs, EntryType.LIQUIDITY_POOL, op.body.liquidity_pool_id)
    # deposit/withdraw never create or remove the pool
    return diff.before_data, diff.after_data or diff.before_data


def liquidity_pool_deposit(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    before, after = _pool_diff(op, diffs)
    if before is None:
        before = after
    details = LiquidityPoolDepositedDetails(
        pool=after,
        reserves_deposited=(
            AssetAmount(after.asset_a, after.reserve_a - before.reserve_a),
            AssetAmount(after.asset_b, after.reserve_b - before.reserve_b),
        ),
        shares_received=after.total_shares - before.total_shares,
    )
    return [EffectDraft.for_account(EffectType.LIQUIDITY_POOL_DEPOSITED, op.source_account, details)]


def liquidity_pool_withdraw(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    before, after = _pool_diff(op, diffs)
    if before is None:
        before = after
    details = LiquidityPoolWithdrewDetails(
        pool=after,
        reserves_received=(
            AssetAmount(after.asset_a, before.reserve_a - after.reserve_a),
            AssetAmount(after.asset_b, before.reserve_b - after.reserve_b),
        ),
        shares_redeemed=before.total_shares - after.total_shares,
    )
    return [EffectDraft.for_account(EffectType.LIQUIDITY_POOL_WITHDREW, op.source_account, details)]


def pool_lifecycle(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    drafts = []
    for diff in diffs_of(diffs, EntryType.LIQUIDITY_POOL):
        if diff.kind == DIFF_CREATED:
            drafts.append(
                EffectDraft.for_account(
                    EffectType.LIQUIDITY_POOL_CREATED, op.source_account, LiquidityPoolDetails(diff.after_data)
                )
            )
        elif diff.kind == DIFF_REMOVED:
            drafts.append(
                EffectDraft.for_account(
                    EffectType.LIQUIDITY_POOL_REMOVED,
                    op.source_account,
                    LiquidityPoolRemovedDetails(diff.key.key_id),
                )
            )
    return drafts
