"""
Tests for claimable balance and liquidity pool derivations.
"""

from __future__ import annotations

import pytest

from entries import A, B, BALANCE_ID, C, POOL_ID, USD, claimable_balance, diff, operation, pool
from stellar_effects.core.exceptions import ProcessingError
from stellar_effects.decoder.models import (
    Asset,
    Claimant,
    ClaimPredicate,
    CreateClaimableBalanceSuccess,
    Price,
)
from stellar_effects.decoder.operations import (
    ClaimClaimableBalanceOp,
    ChangeTrustOp,
    ClawbackClaimableBalanceOp,
    CreateClaimableBalanceOp,
    LiquidityPoolDepositOp,
    LiquidityPoolWithdrawOp,
    OperationKind,
)
from stellar_effects.effects import EffectType, derive_effects

UNCONDITIONAL = ClaimPredicate("unconditional")


def test_create_claimable_balance():
    before_ts = ClaimPredicate("abs_before", value=0)
    claimants = (Claimant(B, UNCONDITIONAL), Claimant(C, ClaimPredicate("not", (before_ts,))))
    op = operation(
        OperationKind.CREATE_CLAIMABLE_BALANCE,
        CreateClaimableBalanceOp(USD, 5_0000000, claimants),
        payload=CreateClaimableBalanceSuccess(BALANCE_ID),
    )
    drafts = derive_effects(op, [diff(None, claimable_balance(claimants=claimants))])
    assert [(d.effect_type, d.address) for d in drafts] == [
        (EffectType.CLAIMABLE_BALANCE_CREATED, A),
        (EffectType.CLAIMABLE_BALANCE_CLAIMANT_CREATED, B),
        (EffectType.CLAIMABLE_BALANCE_CLAIMANT_CREATED, C),
        (EffectType.ACCOUNT_DEBITED, A),
    ]
    assert drafts[0].details.to_dict() == {
        "balance_id": BALANCE_ID,
        "asset": USD.canonical(),
        "amount": "5.0000000",
    }
    assert drafts[1].details.to_dict()["predicate"] == {"unconditional": True}
    assert drafts[2].details.to_dict()["predicate"] == {
        "not": {"abs_before": "1970-01-01T00:00:00Z", "abs_before_epoch": "0"}
    }


def test_claim_claimable_balance():
    op = operation(OperationKind.CLAIM_CLAIMABLE_BALANCE, ClaimClaimableBalanceOp(BALANCE_ID), source=B)
    drafts = derive_effects(op, [diff(claimable_balance(), None)])
    assert [(d.effect_type, d.address) for d in drafts] == [
        (EffectType.CLAIMABLE_BALANCE_CLAIMED, B),
        (EffectType.ACCOUNT_CREDITED, B),
    ]
    assert drafts[1].details.amount == 5_0000000


def test_clawback_claimable_balance():
    op = operation(OperationKind.CLAWBACK_CLAIMABLE_BALANCE, ClawbackClaimableBalanceOp(BALANCE_ID), source=C)
    drafts = derive_effects(op, [diff(claimable_balance(), None)])
    assert [d.effect_type for d in drafts] == [
        EffectType.CLAIMABLE_BALANCE_CLAWED_BACK,
        EffectType.ACCOUNT_CREDITED,
    ]


def test_claim_without_removed_balance_is_an_error():
    op = operation(OperationKind.CLAIM_CLAIMABLE_BALANCE, ClaimClaimableBalanceOp(BALANCE_ID), source=B)
    with pytest.raises(ProcessingError) as exc:
        derive_effects(op, [])
    assert exc.value.context["key_id"] == BALANCE_ID


def test_liquidity_pool_deposit():
    body = LiquidityPoolDepositOp(POOL_ID, 10_0000000, 20_0000000, Price(1, 3), Price(1, 1))
    op = operation(OperationKind.LIQUIDITY_POOL_DEPOSIT, body)
    (draft,) = derive_effects(op, [diff(pool(), pool(110_0000000, 220_0000000, 55_0000000))])
    assert draft.effect_type == EffectType.LIQUIDITY_POOL_DEPOSITED
    out = draft.details.to_dict()
    assert out["reserves_deposited"] == [
        {"asset": "native", "amount": "10.0000000"},
        {"asset": USD.canonical(), "amount": "20.0000000"},
    ]
    assert out["shares_received"] == "5.0000000"
    assert out["liquidity_pool"]["total_shares"] == "55.0000000"
    assert out["liquidity_pool"]["total_trustlines"] == "1"
    assert out["liquidity_pool"]["fee_bp"] == 30


def test_liquidity_pool_withdraw():
    body = LiquidityPoolWithdrawOp(POOL_ID, 5_0000000, 0, 0)
    op = operation(OperationKind.LIQUIDITY_POOL_WITHDRAW, body)
    (draft,) = derive_effects(op, [diff(pool(), pool(90_0000000, 180_0000000, 45_0000000))])
    out = draft.details.to_dict()
    assert out["reserves_received"] == [
        {"asset": "native", "amount": "10.0000000"},
        {"asset": USD.canonical(), "amount": "20.0000000"},
    ]
    assert out["shares_redeemed"] == "5.0000000"


def test_pool_removed_after_last_share_trustline_goes():
    op = operation(OperationKind.CHANGE_TRUST, ChangeTrustOp(Asset.pool_share(POOL_ID), 0))
    drafts = derive_effects(op, [diff(pool(0, 0, 0), None)])
    (removed,) = drafts
    assert removed.effect_type == EffectType.LIQUIDITY_POOL_REMOVED
    assert removed.details.to_dict() == {"liquidity_pool_id": POOL_ID}
