"""
Tests for the effect taxonomy, detail classes and derivation table coverage.
"""

from __future__ import annotations

import pytest

from stellar_effects.decoder.operations import OperationKind
from stellar_effects.effects.details import EFFECT_DETAILS, BalanceChangeDetails, SignerDetails
from stellar_effects.effects.effect_types import (
    EFFECT_TYPE_NAMES,
    EffectType,
    effect_type_from_name,
    effect_type_name,
)
from stellar_effects.effects.models import EffectDraft
from stellar_effects.effects.table import DERIVATION_TABLE
from stellar_effects.core.exceptions import ProcessingError
from stellar_effects.decoder.models import Asset

WIRE_CODES = {
    "account_created": 0,
    "account_removed": 1,
    "account_credited": 2,
    "account_debited": 3,
    "account_thresholds_updated": 4,
    "account_home_domain_updated": 5,
    "account_flags_updated": 6,
    "account_inflation_destination_updated": 7,
    "signer_created": 10,
    "signer_removed": 11,
    "signer_updated": 12,
    "trustline_created": 20,
    "trustline_removed": 21,
    "trustline_updated": 22,
    "trustline_flags_updated": 26,
    "offer_created": 30,
    "offer_removed": 31,
    "offer_updated": 32,
    "trade": 33,
    "data_created": 40,
    "data_removed": 41,
    "data_updated": 42,
    "sequence_bumped": 43,
    "claimable_balance_created": 50,
    "claimable_balance_claimant_created": 51,
    "claimable_balance_claimed": 52,
    "account_sponsorship_created": 60,
    "account_sponsorship_updated": 61,
    "account_sponsorship_removed": 62,
    "trustline_sponsorship_created": 63,
    "trustline_sponsorship_updated": 64,
    "trustline_sponsorship_removed": 65,
    "data_sponsorship_created": 66,
    "data_sponsorship_updated": 67,
    "data_sponsorship_removed": 68,
    "claimable_balance_sponsorship_created": 69,
    "claimable_balance_sponsorship_updated": 70,
    "claimable_balance_sponsorship_removed": 71,
    "signer_sponsorship_created": 72,
    "signer_sponsorship_updated": 73,
    "signer_sponsorship_removed": 74,
    "claimable_balance_clawed_back": 80,
    "liquidity_pool_deposited": 90,
    "liquidity_pool_withdrew": 91,
    "liquidity_pool_trade": 92,
    "liquidity_pool_created": 93,
    "liquidity_pool_removed": 94,
    "liquidity_pool_revoked": 95,
    "contract_credited": 96,
    "contract_debited": 97,
    "extend_footprint_ttl": 98,
    "restore_footprint": 99,
}


def test_wire_codes_are_fixed():
    """Every name maps to its published code and nothing else is defined."""
    assert {e.type_string: int(e) for e in EffectType} == WIRE_CODES


def test_code_name_round_trip():
    """code -> name -> code is the identity over the whole taxonomy."""
    for effect_type in EffectType:
        assert effect_type_from_name(effect_type_name(int(effect_type))) == effect_type
    assert len(set(EFFECT_TYPE_NAMES.values())) == len(EffectType)


def test_unknown_codes_and_names():
    with pytest.raises(ValueError):
        effect_type_name(8)
    with pytest.raises(KeyError):
        effect_type_from_name("account_exploded")


def test_every_effect_type_has_details_class():
    assert set(EFFECT_DETAILS) == set(EffectType)


def test_every_operation_kind_has_derivation():
    """All 27 operation types are dispatched, including the ones that yield nothing of their own."""
    assert set(DERIVATION_TABLE) == set(OperationKind)
    assert len(DERIVATION_TABLE) == 27


def test_draft_rejects_mismatched_details():
    """Details are checked against the effect type when a draft is built."""
    EffectDraft(EffectType.ACCOUNT_CREDITED, "GA", BalanceChangeDetails(Asset.native(), 1))
    with pytest.raises(ProcessingError):
        EffectDraft(EffectType.ACCOUNT_CREDITED, "GA", SignerDetails("GB", 1))
