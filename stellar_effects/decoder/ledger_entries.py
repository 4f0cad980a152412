"""
Ledger keys, ledger entries and entry changes.

Entries are normalized into EntrySnapshot values keyed by (entry type, key id).
Contract data is kept only for Stellar Asset Contract balances; other contract
data, contract code and config settings decode fine but are skipped (None).
"""

from __future__ import annotations

from stellar_effects.decoder.models import (
    AccountState,
    ChangeType,
    ClaimableBalanceState,
    ContractBalanceState,
    DataState,
    EntryKey,
    EntrySnapshot,
    EntryType,
    LedgerEntryChange,
    LiquidityPoolState,
    OfferState,
    ScVal,
    Signer,
    TrustlineState,
    TtlState,
)
from stellar_effects.decoder.types import (
    LIQUIDITY_POOL_CONSTANT_PRODUCT,
    SCV_ADDRESS,
    SCV_I128,
    SCV_MAP,
    SCV_SYMBOL,
    SCV_VEC,
    read_account_id,
    read_asset,
    read_claimable_balance_id,
    read_claimant,
    read_hash_hex,
    read_price,
    read_sc_address,
    read_sc_val,
    read_signer_key,
    read_trustline_asset,
)
from stellar_effects.decoder.xdr_reader import XdrReader

MAX_SIGNERS = 20
MAX_CLAIMANTS = 10


def trustline_key_id(account_id: str, asset_canonical: str) -> str:
    return f"{account_id}:{asset_canonical}"


def offer_key_id(seller_id: str, offer_id: int) -> str:
    return f"{seller_id}:{offer_id}"


def data_key_id(account_id: str, name: str) -> str:
    return f"{account_id}:{name}"


def contract_balance_key_id(contract_id: str, holder: str) -> str:
    return f"{contract_id}:{holder}"


def balance_holder(key: ScVal) -> str | None:
    """Holder address when key is the SAC balance key ["Balance", address]."""
    if key.type_code != SCV_VEC or not key.value or len(key.value) != 2:
        return None
    tag, holder = key.value
    if tag.type_code != SCV_SYMBOL or tag.value != "Balance":
        return None
    if holder.type_code != SCV_ADDRESS:
        return None
    return holder.value


def balance_amount(value: ScVal) -> int | None:
    """i128 'amount' field of a SAC balance map."""
    if value.type_code != SCV_MAP or not value.value:
        return None
    for k, v in value.value:
        if k.type_code == SCV_SYMBOL and k.value == "amount" and v.type_code == SCV_I128:
            return v.value
    return None


def read_ledger_key(r: XdrReader) -> EntryKey | None:
    entry_type = r.int32()
    if entry_type == EntryType.ACCOUNT:
        return EntryKey(EntryType.ACCOUNT, read_account_id(r))
    if entry_type == EntryType.TRUSTLINE:
        account_id = read_account_id(r)
        asset = read_trustline_asset(r)
        return EntryKey(EntryType.TRUSTLINE, trustline_key_id(account_id, asset.canonical()))
    if entry_type == EntryType.OFFER:
        seller_id = read_account_id(r)
        return EntryKey(EntryType.OFFER, offer_key_id(seller_id, r.int64()))
    if entry_type == EntryType.DATA:
        account_id = read_account_id(r)
        return EntryKey(EntryType.DATA, data_key_id(account_id, r.string(64)))
    if entry_type == EntryType.CLAIMABLE_BALANCE:
        return EntryKey(EntryType.CLAIMABLE_BALANCE, read_claimable_balance_id(r))
    if entry_type == EntryType.LIQUIDITY_POOL:
        return EntryKey(EntryType.LIQUIDITY_POOL, read_hash_hex(r))
    if entry_type == EntryType.CONTRACT_DATA:
        contract_id = read_sc_address(r)
        key = read_sc_val(r)
        r.int32()  # durability
        holder = balance_holder(key)
        if holder is None:
            return None
        return EntryKey(EntryType.CONTRACT_DATA, contract_balance_key_id(contract_id, holder))
    if entry_type == EntryType.CONTRACT_CODE:
        r.fixed_opaque(32)
        return None
    if entry_type == EntryType.CONFIG_SETTING:
        r.int32()
        return None
    if entry_type == EntryType.TTL:
        return EntryKey(EntryType.TTL, read_hash_hex(r))
    raise r.unknown("ledger entry type", entry_type)


def _read_signer(r: XdrReader) -> tuple[str, int]:
    return read_signer_key(r), r.uint32()


def _read_account(r: XdrReader) -> AccountState:
    account_id = read_account_id(r)
    balance = r.int64()
    sequence = r.int64()
    num_sub_entries = r.uint32()
    inflation_dest = r.optional(lambda: read_account_id(r))
    flags = r.uint32()
    home_domain = r.string(32)
    master, low, med, high = r.fixed_opaque(4)
    raw_signers = r.array(lambda: _read_signer(r), MAX_SIGNERS)
    sponsors: tuple[str | None, ...] = ()

    v = r.int32()
    if v == 1:
        r.int64()  # liabilities.buying
        r.int64()  # liabilities.selling
        v1 = r.int32()
        if v1 == 2:
            r.uint32()  # numSponsored
            r.uint32()  # numSponsoring
            sponsors = r.array(lambda: r.optional(lambda: read_account_id(r)), MAX_SIGNERS)
            v2 = r.int32()
            if v2 == 3:
                r.extension_point()
                r.uint32()  # seqLedger
                r.uint64()  # seqTime
            elif v2 != 0:
                raise r.unknown("account entry v2 extension", v2)
        elif v1 != 0:
            raise r.unknown("account entry v1 extension", v1)
    elif v != 0:
        raise r.unknown("account entry extension", v)

    signers = tuple(
        Signer(key, weight, sponsors[i] if i < len(sponsors) else None)
        for i, (key, weight) in enumerate(raw_signers)
    )
    return AccountState(
        account_id=account_id,
        balance=balance,
        sequence=sequence,
        num_sub_entries=num_sub_entries,
        inflation_dest=inflation_dest,
        flags=flags,
        home_domain=home_domain,
        master_weight=master,
        low_threshold=low,
        med_threshold=med,
        high_threshold=high,
        signers=signers,
    )


def _read_trustline(r: XdrReader) -> TrustlineState:
    account_id = read_account_id(r)
    asset = read_trustline_asset(r)
    balance = r.int64()
    limit = r.int64()
    flags = r.uint32()
    v = r.int32()
    if v == 1:
        r.int64()
        r.int64()
        v1 = r.int32()
        if v1 == 2:
            r.int32()  # liquidityPoolUseCount
            r.extension_point()
        elif v1 != 0:
            raise r.unknown("trustline v1 extension", v1)
    elif v != 0:
        raise r.unknown("trustline extension", v)
    return TrustlineState(account_id, asset, balance, limit, flags)


def read_offer_entry(r: XdrReader) -> OfferState:
    seller_id = read_account_id(r)
    offer_id = r.int64()
    selling = read_asset(r)
    buying = read_asset(r)
    amount = r.int64()
    price = read_price(r)
    flags = r.uint32()
    r.extension_point()
    return OfferState(seller_id, offer_id, selling, buying, amount, price, flags)


def _read_data(r: XdrReader) -> DataState:
    account_id = read_account_id(r)
    name = r.string(64)
    value = r.var_opaque(64)
    r.extension_point()
    return DataState(account_id, name, value)


def _read_claimable_balance(r: XdrReader) -> ClaimableBalanceState:
    balance_id = read_claimable_balance_id(r)
    claimants = r.array(lambda: read_claimant(r), MAX_CLAIMANTS)
    asset = read_asset(r)
    amount = r.int64()
    flags = 0
    v = r.int32()
    if v == 1:
        r.extension_point()
        flags = r.uint32()
    elif v != 0:
        raise r.unknown("claimable balance extension", v)
    return ClaimableBalanceState(balance_id, claimants, asset, amount, flags)


def _read_liquidity_pool(r: XdrReader) -> LiquidityPoolState:
    pool_id = read_hash_hex(r)
    pool_type = r.int32()
    if pool_type != LIQUIDITY_POOL_CONSTANT_PRODUCT:
        raise r.unknown("liquidity pool type", pool_type)
    asset_a = read_asset(r)
    asset_b = read_asset(r)
    fee = r.int32()
    return LiquidityPoolState(
        pool_id=pool_id,
        asset_a=asset_a,
        asset_b=asset_b,
        fee_bp=fee,
        reserve_a=r.int64(),
        reserve_b=r.int64(),
        total_shares=r.int64(),
        trustline_count=r.int64(),
    )


def _read_contract_data(r: XdrReader) -> tuple[EntryKey, ContractBalanceState] | None:
    r.extension_point()
    contract_id = read_sc_address(r)
    key = read_sc_val(r)
    r.int32()  # durability
    value = read_sc_val(r)
    holder = balance_holder(key)
    if holder is None:
        return None
    amount = balance_amount(value)
    if amount is None:
        return None
    entry_key = EntryKey(EntryType.CONTRACT_DATA, contract_balance_key_id(contract_id, holder))
    return entry_key, ContractBalanceState(contract_id, holder, amount)


def _skip_contract_code(r: XdrReader) -> None:
    v = r.int32()
    if v == 1:
        r.extension_point()
        r.extension_point()
        for _ in range(10):
            r.uint32()
    elif v != 0:
        raise r.unknown("contract code extension", v)
    r.fixed_opaque(32)
    r.var_opaque()


def read_ledger_entry(r: XdrReader) -> EntrySnapshot | None:
    """LedgerEntry -> snapshot, or None for entry kinds that carry no effects."""
    last_modified = r.uint32()
    entry_type = r.int32()
    key: EntryKey | None
    if entry_type == EntryType.ACCOUNT:
        data = _read_account(r)
        key = EntryKey(EntryType.ACCOUNT, data.account_id)
    elif entry_type == EntryType.TRUSTLINE:
        data = _read_trustline(r)
        key = EntryKey(EntryType.TRUSTLINE, trustline_key_id(data.account_id, data.asset.canonical()))
    elif entry_type == EntryType.OFFER:
        data = read_offer_entry(r)
        key = EntryKey(EntryType.OFFER, offer_key_id(data.seller_id, data.offer_id))
    elif entry_type == EntryType.DATA:
        data = _read_data(r)
        key = EntryKey(EntryType.DATA, data_key_id(data.account_id, data.name))
    elif entry_type == EntryType.CLAIMABLE_BALANCE:
        data = _read_claimable_balance(r)
        key = EntryKey(EntryType.CLAIMABLE_BALANCE, data.balance_id)
    elif entry_type == EntryType.LIQUIDITY_POOL:
        data = _read_liquidity_pool(r)
        key = EntryKey(EntryType.LIQUIDITY_POOL, data.pool_id)
    elif entry_type == EntryType.CONTRACT_DATA:
        parsed = _read_contract_data(r)
        key, data = parsed if parsed else (None, None)
    elif entry_type == EntryType.CONTRACT_CODE:
        _skip_contract_code(r)
        key, data = None, None
    elif entry_type == EntryType.TTL:
        data = TtlState(read_hash_hex(r), r.uint32())
        key = EntryKey(EntryType.TTL, data.key_hash)
    elif entry_type == EntryType.CONFIG_SETTING:
        raise r.error("config setting entries are not expected in transaction meta")
    else:
        raise r.unknown("ledger entry type", entry_type)

    sponsor = None
    v = r.int32()
    if v == 1:
        sponsor = r.optional(lambda: read_account_id(r))
        r.extension_point()
    elif v != 0:
        raise r.unknown("ledger entry extension", v)

    if key is None:
        return None
    return EntrySnapshot(key=key, data=data, last_modified_ledger=last_modified, sponsor=sponsor)


def read_entry_change(r: XdrReader) -> LedgerEntryChange | None:
    raw_type = r.int32()
    try:
        change_type = ChangeType(raw_type)
    except ValueError:
        raise r.unknown("ledger entry change", raw_type) from None
    if change_type == ChangeType.REMOVED:
        key = read_ledger_key(r)
        return LedgerEntryChange(change_type, key) if key else None
    snapshot = read_ledger_entry(r)
    if snapshot is None:
        return None
    return LedgerEntryChange(change_type, snapshot.key, snapshot)


def read_entry_changes(r: XdrReader) -> tuple[LedgerEntryChange, ...]:
    changes = r.array(lambda: read_entry_change(r))
    return tuple(c for c in changes if c is not None)
