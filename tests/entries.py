"""
Decoded-model fixtures for derivation tests: operations, entry snapshots and diffs
built directly, without going through XDR.
"""

from __future__ import annotations

from typing import Any

import xdr_builders as xb
from stellar_effects.decoder.ledger_entries import data_key_id, offer_key_id, trustline_key_id
from stellar_effects.decoder.models import (
    AccountState,
    Asset,
    ClaimableBalanceState,
    DataState,
    EntryKey,
    EntrySnapshot,
    EntryType,
    LiquidityPoolState,
    MuxedAccount,
    OfferState,
    Operation,
    OperationResult,
    Price,
    Signer,
    TrustlineState,
)
from stellar_effects.processing.state_diff import EntryDiff

A = xb.address(1)
B = xb.address(2)
ISSUER = xb.address(3)
C = xb.address(4)

USD = Asset("credit_alphanum4", "USD", ISSUER)
EUR = Asset("credit_alphanum4", "EUR", ISSUER)
NATIVE = Asset.native()

POOL_ID = "ab" * 32
BALANCE_ID = "00000000" + "cd" * 32


def operation(kind: int, body: Any, source: str = A, payload: Any = None, index: int = 0) -> Operation:
    """Successful operation with a success result carrying payload."""
    return Operation(
        index=index,
        kind=kind,
        source_account=MuxedAccount(source),
        body=body,
        result=OperationResult(code=0, operation_kind=int(kind), inner_code=0, payload=payload),
        successful=True,
    )


def diff(before: EntrySnapshot | None, after: EntrySnapshot | None) -> EntryDiff:
    return EntryDiff((before or after).key, before, after)


def account(
    address: str = A,
    balance: int = 100_0000000,
    sequence: int = 1,
    signers: tuple[Signer, ...] = (),
    master_weight: int = 1,
    sponsor: str | None = None,
) -> EntrySnapshot:
    state = AccountState(
        account_id=address,
        balance=balance,
        sequence=sequence,
        num_sub_entries=len(signers),
        inflation_dest=None,
        flags=0,
        home_domain="",
        master_weight=master_weight,
        low_threshold=0,
        med_threshold=0,
        high_threshold=0,
        signers=signers,
    )
    return EntrySnapshot(EntryKey(EntryType.ACCOUNT, address), state, sponsor=sponsor)


def trustline(
    address: str = A,
    asset: Asset = USD,
    balance: int = 0,
    limit: int = 1000_0000000,
    flags: int = 1,
    sponsor: str | None = None,
) -> EntrySnapshot:
    state = TrustlineState(address, asset, balance, limit, flags)
    return EntrySnapshot(
        EntryKey(EntryType.TRUSTLINE, trustline_key_id(address, asset.canonical())), state, sponsor=sponsor
    )


def offer(
    seller: str = A,
    offer_id: int = 7,
    amount: int = 10_0000000,
    selling: Asset = USD,
    buying: Asset = NATIVE,
) -> EntrySnapshot:
    state = OfferState(seller, offer_id, selling, buying, amount, Price(1, 2), 0)
    return EntrySnapshot(EntryKey(EntryType.OFFER, offer_key_id(seller, offer_id)), state)


def data(address: str = A, name: str = "config", value: bytes = b"v1", sponsor: str | None = None) -> EntrySnapshot:
    return EntrySnapshot(
        EntryKey(EntryType.DATA, data_key_id(address, name)), DataState(address, name, value), sponsor=sponsor
    )


def claimable_balance(
    balance_id: str = BALANCE_ID,
    asset: Asset = USD,
    amount: int = 5_0000000,
    claimants: tuple = (),
    sponsor: str | None = None,
) -> EntrySnapshot:
    state = ClaimableBalanceState(balance_id, claimants, asset, amount)
    return EntrySnapshot(EntryKey(EntryType.CLAIMABLE_BALANCE, balance_id), state, sponsor=sponsor)


def pool(
    reserve_a: int = 100_0000000,
    reserve_b: int = 200_0000000,
    total_shares: int = 50_0000000,
    pool_id: str = POOL_ID,
    trustline_count: int = 1,
) -> EntrySnapshot:
    state = LiquidityPoolState(pool_id, NATIVE, USD, 30, reserve_a, reserve_b, total_shares, trustline_count)
    return EntrySnapshot(EntryKey(EntryType.LIQUIDITY_POOL, pool_id), state)
