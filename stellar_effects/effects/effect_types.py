"""
Effect taxonomy: fixed integer codes and their canonical names.

Codes are part of the wire contract. Gaps are reserved; never renumber,
only append.
"""

from __future__ import annotations

from enum import IntEnum
from types import MappingProxyType


class EffectType(IntEnum):
    # account effects
    ACCOUNT_CREATED = 0
    ACCOUNT_REMOVED = 1
    ACCOUNT_CREDITED = 2
    ACCOUNT_DEBITED = 3
    ACCOUNT_THRESHOLDS_UPDATED = 4
    ACCOUNT_HOME_DOMAIN_UPDATED = 5
    ACCOUNT_FLAGS_UPDATED = 6
    ACCOUNT_INFLATION_DESTINATION_UPDATED = 7

    # signer effects
    SIGNER_CREATED = 10
    SIGNER_REMOVED = 11
    SIGNER_UPDATED = 12

    # trustline effects
    TRUSTLINE_CREATED = 20
    TRUSTLINE_REMOVED = 21
    TRUSTLINE_UPDATED = 22
    TRUSTLINE_FLAGS_UPDATED = 26

    # trading effects
    OFFER_CREATED = 30
    OFFER_REMOVED = 31
    OFFER_UPDATED = 32
    TRADE = 33

    # data effects
    DATA_CREATED = 40
    DATA_REMOVED = 41
    DATA_UPDATED = 42
    SEQUENCE_BUMPED = 43

    # claimable balance effects
    CLAIMABLE_BALANCE_CREATED = 50
    CLAIMABLE_BALANCE_CLAIMANT_CREATED = 51
    CLAIMABLE_BALANCE_CLAIMED = 52

    # sponsorship effects
    ACCOUNT_SPONSORSHIP_CREATED = 60
    ACCOUNT_SPONSORSHIP_UPDATED = 61
    ACCOUNT_SPONSORSHIP_REMOVED = 62
    TRUSTLINE_SPONSORSHIP_CREATED = 63
    TRUSTLINE_SPONSORSHIP_UPDATED = 64
    TRUSTLINE_SPONSORSHIP_REMOVED = 65
    DATA_SPONSORSHIP_CREATED = 66
    DATA_SPONSORSHIP_UPDATED = 67
    DATA_SPONSORSHIP_REMOVED = 68
    CLAIMABLE_BALANCE_SPONSORSHIP_CREATED = 69
    CLAIMABLE_BALANCE_SPONSORSHIP_UPDATED = 70
    CLAIMABLE_BALANCE_SPONSORSHIP_REMOVED = 71
    SIGNER_SPONSORSHIP_CREATED = 72
    SIGNER_SPONSORSHIP_UPDATED = 73
    SIGNER_SPONSORSHIP_REMOVED = 74

    CLAIMABLE_BALANCE_CLAWED_BACK = 80

    # liquidity pool effects
    LIQUIDITY_POOL_DEPOSITED = 90
    LIQUIDITY_POOL_WITHDREW = 91
    LIQUIDITY_POOL_TRADE = 92
    LIQUIDITY_POOL_CREATED = 93
    LIQUIDITY_POOL_REMOVED = 94
    LIQUIDITY_POOL_REVOKED = 95

    # contract effects
    CONTRACT_CREDITED = 96
    CONTRACT_DEBITED = 97
    EXTEND_FOOTPRINT_TTL = 98
    RESTORE_FOOTPRINT = 99

    @property
    def type_string(self) -> str:
        return EFFECT_TYPE_NAMES[self]


EFFECT_TYPE_NAMES: MappingProxyType[EffectType, str] = MappingProxyType(
    {effect_type: effect_type.name.lower() for effect_type in EffectType}
)

_CODES_BY_NAME: MappingProxyType[str, EffectType] = MappingProxyType(
    {name: effect_type for effect_type, name in EFFECT_TYPE_NAMES.items()}
)


def effect_type_name(code: int) -> str:
    """Canonical name for a code; ValueError for codes outside the taxonomy."""
    return EffectType(code).type_string


def effect_type_from_name(name: str) -> EffectType:
    """Code for a canonical name; KeyError for unknown names."""
    return _CODES_BY_NAME[name]
