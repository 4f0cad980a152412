"""Claimable balance create / claim / clawback derivations."""

from __future__ import annotations

from stellar_effects.decoder.models import (
    CreateClaimableBalanceSuccess,
    EntryType,
    MuxedAccount,
    Operation,
)
from stellar_effects.effects.common import Diffs, credit, debit, require_diff, success_payload
from stellar_effects.effects.details import ClaimableBalanceDetails, ClaimantDetails
from stellar_effects.effects.effect_types import EffectType
from stellar_effects.effects.models import EffectDraft


def create_claimable_balance(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    body = op.body
    balance_id = success_payload(op, CreateClaimableBalanceSuccess).balance_id
    drafts = [
        EffectDraft.for_account(
            EffectType.CLAIMABLE_BALANCE_CREATED,
            op.source_account,
            ClaimableBalanceDetails(balance_id, body.asset, body.amount),
        )
    ]
    for claimant in body.claimants:
        drafts.append(
            EffectDraft.for_account(
                EffectType.CLAIMABLE_BALANCE_CLAIMANT_CREATED,
                MuxedAccount(claimant.destination),
                ClaimantDetails(balance_id, body.asset, body.amount, claimant.predicate),
            )
        )
    drafts.append(debit(op.source_account, body.asset, body.amount))
    return drafts


def _removed_balance(op: Operation, diffs: Diffs):
    return require_diff(op, diffs, EntryType.CLAIMABLE_BALANCE, op.body.balance_id).before_data


def claim_claimable_balance(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    balance = _removed_balance(op, diffs)
    details = ClaimableBalanceDetails(balance.balance_id, balance.asset, balance.amount)
    return [
        EffectDraft.for_account(EffectType.CLAIMABLE_BALANCE_CLAIMED, op.source_account, details),
        credit(op.source_account, balance.asset, balance.amount),
    ]


def clawback_claimable_balance(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    balance = _removed_balance(op, diffs)
    details = ClaimableBalanceDetails(balance.balance_id, balance.asset, balance.amount)
    return [
        EffectDraft.for_account(EffectType.CLAIMABLE_BALANCE_CLAWED_BACK, op.source_account, details),
        credit(op.source_account, balance.asset, balance.amount),
    ]
