"""
Tests for the sponsorship pass over entries and account signers.
"""

from __future__ import annotations

from entries import A, B, BALANCE_ID, C, POOL_ID, USD, account, claimable_balance, data, diff, operation, trustline
from stellar_effects.decoder.models import Asset, EntryKey, EntryType, Signer
from stellar_effects.decoder.operations import (
    BeginSponsoringFutureReservesOp,
    CreateAccountOp,
    EndSponsoringFutureReservesOp,
    OperationKind,
    RevokeSponsorshipOp,
)
from stellar_effects.effects import EffectType, derive_effects


def _revoke(key: EntryKey):
    return operation(OperationKind.REVOKE_SPONSORSHIP, RevokeSponsorshipOp(ledger_key=key), source=C)


def test_sponsoring_markers_have_no_effects_of_their_own():
    begin = operation(OperationKind.BEGIN_SPONSORING_FUTURE_RESERVES, BeginSponsoringFutureReservesOp(B))
    end = operation(OperationKind.END_SPONSORING_FUTURE_RESERVES, EndSponsoringFutureReservesOp(), source=B)
    assert derive_effects(begin, []) == []
    assert derive_effects(end, []) == []


def test_account_sponsorship_created_with_sponsored_account():
    """A sponsored create_account reports the sponsorship addressed to the new account."""
    op = operation(OperationKind.CREATE_ACCOUNT, CreateAccountOp(B, 0))
    drafts = derive_effects(op, [diff(None, account(B, 0, sponsor=C))])
    last = drafts[-1]
    assert last.effect_type == EffectType.ACCOUNT_SPONSORSHIP_CREATED
    assert last.address == B
    assert last.details.to_dict() == {"sponsor": C}


def test_revoke_transfers_trustline_sponsorship():
    before = trustline(B, USD, sponsor=A)
    after = trustline(B, USD, sponsor=C)
    (draft,) = derive_effects(_revoke(before.key), [diff(before, after)])
    assert draft.effect_type == EffectType.TRUSTLINE_SPONSORSHIP_UPDATED
    assert draft.address == B
    assert draft.details.to_dict() == {"former_sponsor": A, "new_sponsor": C, "asset": USD.canonical()}


def test_pool_share_trustline_sponsorship_fields():
    share = Asset.pool_share(POOL_ID)
    before = trustline(B, share, sponsor=A)
    (draft,) = derive_effects(_revoke(before.key), [diff(before, trustline(B, share))])
    assert draft.effect_type == EffectType.TRUSTLINE_SPONSORSHIP_REMOVED
    assert draft.details.to_dict() == {
        "former_sponsor": A,
        "asset_type": "liquidity_pool",
        "liquidity_pool_id": POOL_ID,
    }


def test_data_and_claimable_balance_sponsorships():
    entry = data(B, "config", sponsor=A)
    (data_draft,) = derive_effects(_revoke(entry.key), [diff(entry, data(B, "config"))])
    assert data_draft.effect_type == EffectType.DATA_SPONSORSHIP_REMOVED
    assert data_draft.address == B
    assert data_draft.details.to_dict() == {"former_sponsor": A, "data_name": "config"}

    balance = claimable_balance(sponsor=A)
    (cb_draft,) = derive_effects(_revoke(balance.key), [diff(balance, claimable_balance(sponsor=C))])
    assert cb_draft.effect_type == EffectType.CLAIMABLE_BALANCE_SPONSORSHIP_UPDATED
    assert cb_draft.address == C
    assert cb_draft.details.balance_id == BALANCE_ID


def test_signer_sponsorships():
    before = account(B, signers=(Signer(A, 1, sponsor=C), Signer(C, 1, sponsor=A)))
    after = account(B, signers=(Signer(A, 1), Signer(C, 1, sponsor=B), Signer(USD.issuer, 1, sponsor=A)))
    op = operation(
        OperationKind.REVOKE_SPONSORSHIP, RevokeSponsorshipOp(account_id=B, signer_key=A), source=C
    )
    drafts = derive_effects(op, [diff(before, after)])
    by_signer = {d.details.signer: d for d in drafts}
    assert by_signer[A].effect_type == EffectType.SIGNER_SPONSORSHIP_REMOVED
    assert by_signer[A].details.to_dict() == {"former_sponsor": C, "signer": A}
    assert by_signer[C].effect_type == EffectType.SIGNER_SPONSORSHIP_UPDATED
    assert by_signer[C].details.to_dict() == {"former_sponsor": A, "new_sponsor": B, "signer": C}
    assert by_signer[USD.issuer].effect_type == EffectType.SIGNER_SPONSORSHIP_CREATED
    assert all(d.address == C for d in drafts)
    assert [d.details.signer for d in drafts] == sorted(by_signer)


def test_unchanged_sponsor_is_silent():
    entry = trustline(B, USD, sponsor=A)
    assert derive_effects(_revoke(entry.key), [diff(entry, trustline(B, USD, balance=5, sponsor=A))]) == []
