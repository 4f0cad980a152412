"""
Readers for the shared Stellar XDR types: keys, accounts, assets, prices,
claim predicates, claimable balance / pool ids and Soroban values.
"""

from __future__ import annotations

import hashlib

from stellar_effects.decoder.models import (
    ASSET_TYPE_CREDIT_ALPHANUM4,
    ASSET_TYPE_CREDIT_ALPHANUM12,
    PREDICATE_ABS_BEFORE,
    PREDICATE_AND,
    PREDICATE_NOT,
    PREDICATE_OR,
    PREDICATE_REL_BEFORE,
    PREDICATE_UNCONDITIONAL,
    Asset,
    ClaimPredicate,
    Claimant,
    MuxedAccount,
    Price,
    ScVal,
)
from stellar_effects.decoder.xdr_reader import XdrReader
from stellar_effects.utils import strkey

KEY_TYPE_ED25519 = 0
KEY_TYPE_MUXED_ED25519 = 0x100

SIGNER_KEY_ED25519 = 0
SIGNER_KEY_PRE_AUTH_TX = 1
SIGNER_KEY_HASH_X = 2
SIGNER_KEY_ED25519_SIGNED_PAYLOAD = 3

ASSET_NATIVE = 0
ASSET_CREDIT_ALPHANUM4 = 1
ASSET_CREDIT_ALPHANUM12 = 2
ASSET_POOL_SHARE = 3

LIQUIDITY_POOL_CONSTANT_PRODUCT = 0

SC_ADDRESS_ACCOUNT = 0
SC_ADDRESS_CONTRACT = 1
SC_ADDRESS_MUXED_ACCOUNT = 2
SC_ADDRESS_CLAIMABLE_BALANCE = 3
SC_ADDRESS_LIQUIDITY_POOL = 4

# SCValType
SCV_BOOL = 0
SCV_VOID = 1
SCV_ERROR = 2
SCV_U32 = 3
SCV_I32 = 4
SCV_U64 = 5
SCV_I64 = 6
SCV_TIMEPOINT = 7
SCV_DURATION = 8
SCV_U128 = 9
SCV_I128 = 10
SCV_U256 = 11
SCV_I256 = 12
SCV_BYTES = 13
SCV_STRING = 14
SCV_SYMBOL = 15
SCV_VEC = 16
SCV_MAP = 17
SCV_ADDRESS = 18
SCV_CONTRACT_INSTANCE = 19
SCV_LEDGER_KEY_CONTRACT_INSTANCE = 20
SCV_LEDGER_KEY_NONCE = 21

CONTRACT_EXECUTABLE_WASM = 0
CONTRACT_EXECUTABLE_STELLAR_ASSET = 1

MAX_SCVAL_DEPTH = 64


def read_ed25519(r: XdrReader) -> bytes:
    return r.fixed_opaque(32)


def read_hash_hex(r: XdrReader) -> str:
    return r.fixed_opaque(32).hex()


def read_account_id(r: XdrReader) -> str:
    """PublicKey union; only PUBLIC_KEY_TYPE_ED25519 exists."""
    key_type = r.int32()
    if key_type != KEY_TYPE_ED25519:
        raise r.unknown("public key", key_type)
    return strkey.encode_account_id(read_ed25519(r))


def read_muxed_account(r: XdrReader) -> MuxedAccount:
    key_type = r.int32()
    if key_type == KEY_TYPE_ED25519:
        return MuxedAccount(strkey.encode_account_id(read_ed25519(r)))
    if key_type == KEY_TYPE_MUXED_ED25519:
        muxed_id = r.uint64()
        key = read_ed25519(r)
        return MuxedAccount(
            address=strkey.encode_account_id(key),
            muxed_address=strkey.encode_muxed_account(key, muxed_id),
            muxed_id=muxed_id,
        )
    raise r.unknown("muxed account", key_type)


def read_signer_key(r: XdrReader) -> str:
    key_type = r.int32()
    if key_type == SIGNER_KEY_ED25519:
        return strkey.encode_account_id(read_ed25519(r))
    if key_type == SIGNER_KEY_PRE_AUTH_TX:
        return strkey.encode_pre_auth_tx(r.fixed_opaque(32))
    if key_type == SIGNER_KEY_HASH_X:
        return strkey.encode_sha256_hash(r.fixed_opaque(32))
    if key_type == SIGNER_KEY_ED25519_SIGNED_PAYLOAD:
        key = read_ed25519(r)
        payload = r.var_opaque(64)
        return strkey.encode_signed_payload(key, payload)
    raise r.unknown("signer key", key_type)


def _asset_code(raw: bytes) -> str:
    return raw.rstrip(b"\x00").decode("ascii", errors="replace")


def _read_credit_asset(r: XdrReader, asset_type: int) -> Asset:
    if asset_type == ASSET_CREDIT_ALPHANUM4:
        code = _asset_code(r.fixed_opaque(4))
        return Asset(ASSET_TYPE_CREDIT_ALPHANUM4, code, read_account_id(r))
    code = _asset_code(r.fixed_opaque(12))
    return Asset(ASSET_TYPE_CREDIT_ALPHANUM12, code, read_account_id(r))


def read_asset(r: XdrReader) -> Asset:
    asset_type = r.int32()
    if asset_type == ASSET_NATIVE:
        return Asset.native()
    if asset_type in (ASSET_CREDIT_ALPHANUM4, ASSET_CREDIT_ALPHANUM12):
        return _read_credit_asset(r, asset_type)
    raise r.unknown("asset", asset_type)


def read_asset_code(r: XdrReader) -> str:
    """AssetCode union used by allow_trust (code only, no issuer)."""
    asset_type = r.int32()
    if asset_type == ASSET_CREDIT_ALPHANUM4:
        return _asset_code(r.fixed_opaque(4))
    if asset_type == ASSET_CREDIT_ALPHANUM12:
        return _asset_code(r.fixed_opaque(12))
    raise r.unknown("asset code", asset_type)


def read_pool_parameters(r: XdrReader) -> tuple[str, Asset, Asset, int]:
    """LiquidityPoolParameters; the pool id is sha256 of the parameters' XDR."""
    start = r.offset
    pool_type = r.int32()
    if pool_type != LIQUIDITY_POOL_CONSTANT_PRODUCT:
        raise r.unknown("liquidity pool type", pool_type)
    asset_a = read_asset(r)
    asset_b = read_asset(r)
    fee = r.int32()
    pool_id = hashlib.sha256(r.slice(start)).hexdigest()
    return pool_id, asset_a, asset_b, fee


def read_change_trust_asset(r: XdrReader) -> Asset:
    asset_type = r.int32()
    if asset_type == ASSET_NATIVE:
        return Asset.native()
    if asset_type in (ASSET_CREDIT_ALPHANUM4, ASSET_CREDIT_ALPHANUM12):
        return _read_credit_asset(r, asset_type)
    if asset_type == ASSET_POOL_SHARE:
        pool_id, _, _, _ = read_pool_parameters(r)
        return Asset.pool_share(pool_id)
    raise r.unknown("change trust asset", asset_type)


def read_trustline_asset(r: XdrReader) -> Asset:
    asset_type = r.int32()
    if asset_type == ASSET_NATIVE:
        return Asset.native()
    if asset_type in (ASSET_CREDIT_ALPHANUM4, ASSET_CREDIT_ALPHANUM12):
        return _read_credit_asset(r, asset_type)
    if asset_type == ASSET_POOL_SHARE:
        return Asset.pool_share(read_hash_hex(r))
    raise r.unknown("trustline asset", asset_type)


def read_price(r: XdrReader) -> Price:
    return Price(r.int32(), r.int32())


def read_claimable_balance_id(r: XdrReader) -> str:
    """Hex of the full ClaimableBalanceID XDR (type prefix included), as Horizon shows it."""
    start = r.offset
    id_type = r.int32()
    if id_type != 0:
        raise r.unknown("claimable balance id", id_type)
    r.fixed_opaque(32)
    return r.slice(start).hex()


def read_claim_predicate(r: XdrReader, depth: int = 0) -> ClaimPredicate:
    if depth > 4:
        raise r.error("claim predicate nested too deeply")
    kind = r.int32()
    if kind == 0:
        return ClaimPredicate(PREDICATE_UNCONDITIONAL)
    if kind == 1:
        return ClaimPredicate(PREDICATE_AND, r.array(lambda: read_claim_predicate(r, depth + 1), 2))
    if kind == 2:
        return ClaimPredicate(PREDICATE_OR, r.array(lambda: read_claim_predicate(r, depth + 1), 2))
    if kind == 3:
        inner = r.optional(lambda: read_claim_predicate(r, depth + 1))
        return ClaimPredicate(PREDICATE_NOT, (inner,) if inner else ())
    if kind == 4:
        return ClaimPredicate(PREDICATE_ABS_BEFORE, value=r.int64())
    if kind == 5:
        return ClaimPredicate(PREDICATE_REL_BEFORE, value=r.int64())
    raise r.unknown("claim predicate", kind)


def read_claimant(r: XdrReader) -> Claimant:
    claimant_type = r.int32()
    if claimant_type != 0:
        raise r.unknown("claimant", claimant_type)
    destination = read_account_id(r)
    return Claimant(destination, read_claim_predicate(r))


def read_sc_address(r: XdrReader) -> str:
    address_type = r.int32()
    if address_type == SC_ADDRESS_ACCOUNT:
        return read_account_id(r)
    if address_type == SC_ADDRESS_CONTRACT:
        return strkey.encode_contract(r.fixed_opaque(32))
    if address_type == SC_ADDRESS_MUXED_ACCOUNT:
        muxed_id = r.uint64()
        return strkey.encode_muxed_account(read_ed25519(r), muxed_id)
    if address_type == SC_ADDRESS_CLAIMABLE_BALANCE:
        id_type = r.int32()
        if id_type != 0:
            raise r.unknown("claimable balance id", id_type)
        return strkey.encode_claimable_balance(r.fixed_opaque(32), id_type)
    if address_type == SC_ADDRESS_LIQUIDITY_POOL:
        return strkey.encode_liquidity_pool(r.fixed_opaque(32))
    raise r.unknown("sc address", address_type)


def read_contract_executable(r: XdrReader) -> str | None:
    """Wasm hash (hex) or None for the built-in Stellar Asset Contract."""
    kind = r.int32()
    if kind == CONTRACT_EXECUTABLE_WASM:
        return read_hash_hex(r)
    if kind == CONTRACT_EXECUTABLE_STELLAR_ASSET:
        return None
    raise r.unknown("contract executable", kind)


def _read_sc_map(r: XdrReader, depth: int) -> tuple[tuple[ScVal, ScVal], ...]:
    return r.array(lambda: (read_sc_val(r, depth + 1), read_sc_val(r, depth + 1)))


def read_sc_val(r: XdrReader, depth: int = 0) -> ScVal:
    if depth > MAX_SCVAL_DEPTH:
        raise r.error("sc value nested too deeply")
    t = r.int32()
    if t == SCV_BOOL:
        return ScVal(t, r.boolean())
    if t in (SCV_VOID, SCV_LEDGER_KEY_CONTRACT_INSTANCE):
        return ScVal(t)
    if t == SCV_ERROR:
        error_type = r.int32()
        if not 0 <= error_type <= 9:
            raise r.unknown("sc error", error_type)
        return ScVal(t, (error_type, r.uint32()))
    if t == SCV_U32:
        return ScVal(t, r.uint32())
    if t == SCV_I32:
        return ScVal(t, r.int32())
    if t in (SCV_U64, SCV_TIMEPOINT, SCV_DURATION):
        return ScVal(t, r.uint64())
    if t == SCV_I64:
        return ScVal(t, r.int64())
    if t == SCV_U128:
        hi = r.uint64()
        return ScVal(t, (hi << 64) | r.uint64())
    if t == SCV_I128:
        hi = r.int64()
        return ScVal(t, (hi << 64) | r.uint64())
    if t in (SCV_U256, SCV_I256):
        hi_hi = r.int64() if t == SCV_I256 else r.uint64()
        hi_lo, lo_hi, lo_lo = r.uint64(), r.uint64(), r.uint64()
        return ScVal(t, (hi_hi << 192) | (hi_lo << 128) | (lo_hi << 64) | lo_lo)
    if t == SCV_BYTES:
        return ScVal(t, r.var_opaque())
    if t == SCV_STRING:
        return ScVal(t, r.string())
    if t == SCV_SYMBOL:
        return ScVal(t, r.string(32))
    if t == SCV_VEC:
        return ScVal(t, r.optional(lambda: r.array(lambda: read_sc_val(r, depth + 1))))
    if t == SCV_MAP:
        return ScVal(t, r.optional(lambda: _read_sc_map(r, depth)))
    if t == SCV_ADDRESS:
        return ScVal(t, read_sc_address(r))
    if t == SCV_CONTRACT_INSTANCE:
        executable = read_contract_executable(r)
        storage = r.optional(lambda: _read_sc_map(r, depth))
        return ScVal(t, (executable, storage))
    if t == SCV_LEDGER_KEY_NONCE:
        return ScVal(t, r.int64())
    raise r.unknown("sc value", t)
