"""
Offer crossing: trade effects for order-book claims, liquidity_pool_trade for
pool claims, and the offer lifecycle of manage-offer operations.
"""

from __future__ import annotations

from typing import Sequence

from stellar_effects.decoder.models import ClaimAtom, EntryType, ManageOfferSuccess, Operation
from stellar_effects.effects.common import Diffs, diffs_of, find_diff, success_payload
from stellar_effects.effects.details import (
    AssetAmount,
    LiquidityPoolTradeDetails,
    OfferDetails,
    TradeDetails,
)
from stellar_effects.effects.effect_types import EffectType
from stellar_effects.effects.models import EffectDraft
from stellar_effects.processing.state_diff import DIFF_CREATED, DIFF_REMOVED


def _pool_trade(op: Operation, claim: ClaimAtom, diffs: Diffs) -> EffectDraft:
    diff = find_diff(diffs, EntryType.LIQUIDITY_POOL, claim.liquidity_pool_id)
    pool = diff.after_data if diff is not None else None
    details = LiquidityPoolTradeDetails(
        pool=pool,
        liquidity_pool_id=claim.liquidity_pool_id,
        sold=AssetAmount(claim.asset_sold, claim.amount_sold),
        bought=AssetAmount(claim.asset_bought, claim.amount_bought),
    )
    return EffectDraft.for_account(EffectType.LIQUIDITY_POOL_TRADE, op.source_account, details)


def trade_effects(op: Operation, claims: Sequence[ClaimAtom], diffs: Diffs) -> list[EffectDraft]:
    """
    One effect per claim, addressed to the taker. The claim is recorded from
    the counterparty's side, so sold/bought swap for the taker.
    """
    drafts = []
    for claim in claims:
        if claim.amount_sold == 0 and claim.amount_bought == 0:
            continue
        if claim.is_liquidity_pool:
            drafts.append(_pool_trade(op, claim, diffs))
            continue
        details = TradeDetails(
            seller=claim.seller_id,
            offer_id=claim.offer_id,
            sold_asset=claim.asset_bought,
            sold_amount=claim.amount_bought,
            bought_asset=claim.asset_sold,
            bought_amount=claim.amount_sold,
        )
        drafts.append(EffectDraft.for_account(EffectType.TRADE, op.source_account, details))
    return drafts


def _offer_details(state) -> OfferDetails:
    return OfferDetails(state.offer_id, state.selling, state.buying, state.amount, state.price)


def offer_lifecycle(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    drafts = []
    for diff in diffs_of(diffs, EntryType.OFFER):
        state = diff.before_data if diff.kind == DIFF_REMOVED else diff.after_data
        if state.seller_id != op.source_address:
            continue
        if diff.kind == DIFF_CREATED:
            effect_type = EffectType.OFFER_CREATED
        elif diff.kind == DIFF_REMOVED:
            effect_type = EffectType.OFFER_REMOVED
        else:
            effect_type = EffectType.OFFER_UPDATED
        drafts.append(EffectDraft.for_account(effect_type, op.source_account, _offer_details(state)))
    return drafts


def manage_offer(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    """manage_sell_offer, manage_buy_offer and create_passive_sell_offer."""
    result = success_payload(op, ManageOfferSuccess)
    return trade_effects(op, result.claims, diffs) + offer_lifecycle(op, diffs)
