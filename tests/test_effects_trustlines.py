"""
Tests for change_trust, trust authorization and pool-share revocation.
"""

from __future__ import annotations

from entries import A, B, ISSUER, NATIVE, POOL_ID, USD, claimable_balance, diff, operation, pool, trustline
from stellar_effects.decoder.models import Asset
from stellar_effects.decoder.operations import (
    AllowTrustOp,
    ChangeTrustOp,
    OperationKind,
    SetTrustLineFlagsOp,
)
from stellar_effects.effects import EffectType, derive_effects


def test_change_trust_created():
    op = operation(OperationKind.CHANGE_TRUST, ChangeTrustOp(USD, 500_0000000))
    (draft,) = derive_effects(op, [diff(None, trustline(A, USD))])
    assert draft.effect_type == EffectType.TRUSTLINE_CREATED
    assert draft.address == A
    assert draft.details.to_dict() == {
        "asset_type": "credit_alphanum4",
        "asset_code": "USD",
        "asset_issuer": ISSUER,
        "limit": "500.0000000",
    }


def test_change_trust_updated_and_removed():
    op = operation(OperationKind.CHANGE_TRUST, ChangeTrustOp(USD, 10))
    (updated,) = derive_effects(op, [diff(trustline(A, USD, limit=5), trustline(A, USD, limit=10))])
    assert updated.effect_type == EffectType.TRUSTLINE_UPDATED
    op = operation(OperationKind.CHANGE_TRUST, ChangeTrustOp(USD, 0))
    (removed,) = derive_effects(op, [diff(trustline(A, USD), None)])
    assert removed.effect_type == EffectType.TRUSTLINE_REMOVED


def test_change_trust_pool_share_creates_pool():
    share = Asset.pool_share(POOL_ID)
    op = operation(OperationKind.CHANGE_TRUST, ChangeTrustOp(share, 100))
    drafts = derive_effects(op, [diff(None, trustline(A, share)), diff(None, pool(0, 0, 0))])
    assert [d.effect_type for d in drafts] == [EffectType.TRUSTLINE_CREATED, EffectType.LIQUIDITY_POOL_CREATED]
    assert drafts[0].details.to_dict() == {
        "asset_type": "liquidity_pool_shares",
        "liquidity_pool_id": POOL_ID,
        "limit": "0.0000100",
    }
    assert drafts[1].details.to_dict()["liquidity_pool"]["id"] == POOL_ID


def test_allow_trust_reports_changed_flags_only():
    op = operation(OperationKind.ALLOW_TRUST, AllowTrustOp(B, "USD", 0), source=ISSUER)
    (draft,) = derive_effects(op, [diff(trustline(B, USD, flags=1 | 4), trustline(B, USD, flags=4))])
    assert draft.effect_type == EffectType.TRUSTLINE_FLAGS_UPDATED
    assert draft.address == ISSUER
    assert draft.details.to_dict() == {
        "trustor": B,
        "asset_type": "credit_alphanum4",
        "asset_code": "USD",
        "asset_issuer": ISSUER,
        "authorized_flag": False,
    }


def test_set_trust_line_flags():
    op = operation(OperationKind.SET_TRUST_LINE_FLAGS, SetTrustLineFlagsOp(B, USD, 1, 2), source=ISSUER)
    (draft,) = derive_effects(op, [diff(trustline(B, USD, flags=1), trustline(B, USD, flags=2))])
    out = draft.details.to_dict()
    assert out["authorized_flag"] is False
    assert out["authorized_to_maintain_liabilities_flag"] is True
    assert "clawback_enabled_flag" not in out


def test_unchanged_flags_emit_nothing():
    op = operation(OperationKind.SET_TRUST_LINE_FLAGS, SetTrustLineFlagsOp(B, USD, 0, 1), source=ISSUER)
    assert derive_effects(op, [diff(trustline(B, USD, flags=1), trustline(B, USD, flags=1))]) == []


def test_deauthorization_revokes_pool_shares():
    """Revoked reserves carry the ids of the claimable balances created for them."""
    share = Asset.pool_share(POOL_ID)
    native_balance = claimable_balance("00000000" + "01" * 32, NATIVE, 10_0000000, sponsor=B)
    usd_balance = claimable_balance("00000000" + "02" * 32, USD, 20_0000000, sponsor=B)
    diffs = [
        diff(trustline(B, USD, flags=1), trustline(B, USD, flags=0)),
        diff(trustline(B, share, balance=5_0000000), None),
        diff(None, native_balance),
        diff(None, usd_balance),
        diff(pool(), pool(90_0000000, 180_0000000, 45_0000000)),
    ]
    op = operation(OperationKind.SET_TRUST_LINE_FLAGS, SetTrustLineFlagsOp(B, USD, 1, 0), source=ISSUER)
    drafts = derive_effects(op, diffs)
    types = [d.effect_type for d in drafts]
    assert types[:2] == [EffectType.TRUSTLINE_FLAGS_UPDATED, EffectType.LIQUIDITY_POOL_REVOKED]
    revoked = drafts[1].details.to_dict()
    assert revoked["shares_revoked"] == "5.0000000"
    assert revoked["reserves_revoked"] == [
        {"asset": "native", "amount": "10.0000000", "claimable_balance_id": native_balance.data.balance_id},
        {"asset": USD.canonical(), "amount": "20.0000000", "claimable_balance_id": usd_balance.data.balance_id},
    ]
    # the new balances are sponsored, so the sponsorship pass reports them
    assert types[2:] == [EffectType.CLAIMABLE_BALANCE_SPONSORSHIP_CREATED] * 2
    assert EffectType.CLAIMABLE_BALANCE_CREATED not in types
