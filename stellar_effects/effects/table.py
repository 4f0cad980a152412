"""
Derivation table: operation kind -> derivation function.

Every operation kind must have an entry; the check runs at import so a new
kind without a derivation fails fast instead of silently yielding nothing.
After the kind-specific effects, every operation gets the sponsorship pass
and the liquidity pool created / removed pass over its diff.
"""

from __future__ import annotations

from types import MappingProxyType

from stellar_effects.core.exceptions import ProcessingError
from stellar_effects.decoder.models import Operation
from stellar_effects.decoder.operations import OperationKind
from stellar_effects.effects import (
    accounts,
    claimable_balances,
    liquidity_pools,
    offers,
    payments,
    soroban,
    sponsorships,
    trustlines,
)
from stellar_effects.effects.common import DerivationFn, Diffs, no_effects
from stellar_effects.effects.models import EffectDraft

DERIVATION_TABLE: MappingProxyType[OperationKind, DerivationFn] = MappingProxyType(
    {
        OperationKind.CREATE_ACCOUNT: accounts.create_account,
        OperationKind.PAYMENT: payments.payment,
        OperationKind.PATH_PAYMENT_STRICT_RECEIVE: payments.path_payment_strict_receive,
        OperationKind.MANAGE_SELL_OFFER: offers.manage_offer,
        OperationKind.CREATE_PASSIVE_SELL_OFFER: offers.manage_offer,
        OperationKind.SET_OPTIONS: accounts.set_options,
        OperationKind.CHANGE_TRUST: trustlines.change_trust,
        OperationKind.ALLOW_TRUST: trustlines.trust_authorization,
        OperationKind.ACCOUNT_MERGE: accounts.account_merge,
        OperationKind.INFLATION: accounts.inflation,
        OperationKind.MANAGE_DATA: accounts.manage_data,
        OperationKind.BUMP_SEQUENCE: accounts.bump_sequence,
        OperationKind.MANAGE_BUY_OFFER: offers.manage_offer,
        OperationKind.PATH_PAYMENT_STRICT_SEND: payments.path_payment_strict_send,
        OperationKind.CREATE_CLAIMABLE_BALANCE: claimable_balances.create_claimable_balance,
        OperationKind.CLAIM_CLAIMABLE_BALANCE: claimable_balances.claim_claimable_balance,
        OperationKind.BEGIN_SPONSORING_FUTURE_RESERVES: no_effects,
        OperationKind.END_SPONSORING_FUTURE_RESERVES: no_effects,
        OperationKind.REVOKE_SPONSORSHIP: no_effects,
        OperationKind.CLAWBACK: payments.clawback,
        OperationKind.CLAWBACK_CLAIMABLE_BALANCE: claimable_balances.clawback_claimable_balance,
        OperationKind.SET_TRUST_LINE_FLAGS: trustlines.trust_authorization,
        OperationKind.LIQUIDITY_POOL_DEPOSIT: liquidity_pools.liquidity_pool_deposit,
        OperationKind.LIQUIDITY_POOL_WITHDRAW: liquidity_pools.liquidity_pool_withdraw,
        OperationKind.INVOKE_HOST_FUNCTION: soroban.invoke_host_function,
        OperationKind.EXTEND_FOOTPRINT_TTL: soroban.extend_footprint_ttl,
        OperationKind.RESTORE_FOOTPRINT: soroban.restore_footprint,
    }
)

_missing = set(OperationKind) - set(DERIVATION_TABLE)
if _missing:
    raise RuntimeError(f"operation kinds without a derivation: {sorted(_missing)}")


def derive_effects(operation: Operation, diffs: Diffs) -> list[EffectDraft]:
    """
    Effects of one operation, in emission order. Unsuccessful operations have
    none; an operation kind outside the table is a processing error.
    """
    if not operation.successful:
        return []
    try:
        derive = DERIVATION_TABLE[OperationKind(operation.kind)]
    except (ValueError, KeyError):
        raise ProcessingError(f"no derivation for operation type {operation.kind}").with_context(
            "operation_index", operation.index
        ) from None
    drafts = derive(operation, diffs)
    drafts.extend(sponsorships.sponsorship_effects(operation, diffs))
    drafts.extend(liquidity_pools.pool_lifecycle(operation, diffs))
    return drafts
