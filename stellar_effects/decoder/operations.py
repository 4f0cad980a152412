"""
Operation bodies.

One frozen dataclass per operation type and a reader that dispatches on the
OperationType discriminant. OperationKind values are the protocol codes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable

from stellar_effects.decoder.ledger_entries import read_ledger_key
from stellar_effects.decoder.models import (
    Asset,
    Claimant,
    EntryKey,
    EnvelopeOperation,
    MuxedAccount,
    Price,
    ScVal,
)
from stellar_effects.decoder.types import (
    read_account_id,
    read_asset,
    read_asset_code,
    read_change_trust_asset,
    read_claimable_balance_id,
    read_claimant,
    read_contract_executable,
    read_hash_hex,
    read_muxed_account,
    read_price,
    read_sc_address,
    read_sc_val,
    read_signer_key,
)
from stellar_effects.decoder.xdr_reader import XdrReader

MAX_PATH = 5
MAX_CLAIMANTS = 10


class OperationKind(IntEnum):
    CREATE_ACCOUNT = 0
    PAYMENT = 1
    PATH_PAYMENT_STRICT_RECEIVE = 2
    MANAGE_SELL_OFFER = 3
    CREATE_PASSIVE_SELL_OFFER = 4
    SET_OPTIONS = 5
    CHANGE_TRUST = 6
    ALLOW_TRUST = 7
    ACCOUNT_MERGE = 8
    INFLATION = 9
    MANAGE_DATA = 10
    BUMP_SEQUENCE = 11
    MANAGE_BUY_OFFER = 12
    PATH_PAYMENT_STRICT_SEND = 13
    CREATE_CLAIMABLE_BALANCE = 14
    CLAIM_CLAIMABLE_BALANCE = 15
    BEGIN_SPONSORING_FUTURE_RESERVES = 16
    END_SPONSORING_FUTURE_RESERVES = 17
    REVOKE_SPONSORSHIP = 18
    CLAWBACK = 19
    CLAWBACK_CLAIMABLE_BALANCE = 20
    SET_TRUST_LINE_FLAGS = 21
    LIQUIDITY_POOL_DEPOSIT = 22
    LIQUIDITY_POOL_WITHDRAW = 23
    INVOKE_HOST_FUNCTION = 24
    EXTEND_FOOTPRINT_TTL = 25
    RESTORE_FOOTPRINT = 26


@dataclass(frozen=True)
class CreateAccountOp:
    destination: str
    starting_balance: int


@dataclass(frozen=True)
class PaymentOp:
    destination: MuxedAccount
    asset: Asset
    amount: int


@dataclass(frozen=True)
class PathPaymentStrictReceiveOp:
    send_asset: Asset
    send_max: int
    destination: MuxedAccount
    dest_asset: Asset
    dest_amount: int
    path: tuple[Asset, ...] = ()


@dataclass(frozen=True)
class PathPaymentStrictSendOp:
    send_asset: Asset
    send_amount: int
    destination: MuxedAccount
    dest_asset: Asset
    dest_min: int
    path: tuple[Asset, ...] = ()


@dataclass(frozen=True)
class ManageSellOfferOp:
    selling: Asset
    buying: Asset
    amount: int
    price: Price
    offer_id: int


@dataclass(frozen=True)
class ManageBuyOfferOp:
    selling: Asset
    buying: Asset
    buy_amount: int
    price: Price
    offer_id: int


@dataclass(frozen=True)
class CreatePassiveSellOfferOp:
    selling: Asset
    buying: Asset
    amount: int
    price: Price


@dataclass(frozen=True)
class SignerSpec:
    key: str
    weight: int


@dataclass(frozen=True)
class SetOptionsOp:
    inflation_dest: str | None = None
    clear_flags: int | None = None
    set_flags: int | None = None
    master_weight: int | None = None
    low_threshold: int | None = None
    med_threshold: int | None = None
    high_threshold: int | None = None
    home_domain: str | None = None
    signer: SignerSpec | None = None


@dataclass(frozen=True)
class ChangeTrustOp:
    line: Asset
    limit: int


@dataclass(frozen=True)
class AllowTrustOp:
    trustor: str
    asset_code: str
    authorize: int


@dataclass(frozen=True)
class AccountMergeOp:
    destination: MuxedAccount


@dataclass(frozen=True)
class InflationOp:
    pass


@dataclass(frozen=True)
class ManageDataOp:
    name: str
    value: bytes | None


@dataclass(frozen=True)
class BumpSequenceOp:
    bump_to: int


@dataclass(frozen=True)
class CreateClaimableBalanceOp:
    asset: Asset
    amount: int
    claimants: tuple[Claimant, ...]


@dataclass(frozen=True)
class ClaimClaimableBalanceOp:
    balance_id: str


@dataclass(frozen=True)
class BeginSponsoringFutureReservesOp:
    sponsored_id: str


@dataclass(frozen=True)
class EndSponsoringFutureReservesOp:
    pass


@dataclass(frozen=True)
class RevokeSponsorshipOp:
    """Either ledger_key (entry revocation) or account_id + signer_key (signer revocation)."""

    ledger_key: EntryKey | None = None
    account_id: str | None = None
    signer_key: str | None = None


@dataclass(frozen=True)
class ClawbackOp:
    asset: Asset
    from_account: MuxedAccount
    amount: int


@dataclass(frozen=True)
class ClawbackClaimableBalanceOp:
    balance_id: str


@dataclass(frozen=True)
class SetTrustLineFlagsOp:
    trustor: str
    asset: Asset
    clear_flags: int
    set_flags: int


@dataclass(frozen=True)
class LiquidityPoolDepositOp:
    liquidity_pool_id: str
    max_amount_a: int
    max_amount_b: int
    min_price: Price
    max_price: Price


@dataclass(frozen=True)
class LiquidityPoolWithdrawOp:
    liquidity_pool_id: str
    amount: int
    min_amount_a: int
    min_amount_b: int


HOST_FUNCTION_INVOKE_CONTRACT = 0
HOST_FUNCTION_CREATE_CONTRACT = 1
HOST_FUNCTION_UPLOAD_WASM = 2
HOST_FUNCTION_CREATE_CONTRACT_V2 = 3


@dataclass(frozen=True)
class HostFunction:
    """
    function_type: invoke / create / upload / create v2.
    contract_address and function_name are set for invocations; args holds
    invocation arguments or constructor arguments.
    """

    function_type: int
    contract_address: str | None = None
    function_name: str | None = None
    args: tuple[ScVal, ...] = ()
    wasm_hash: str | None = None


@dataclass(frozen=True)
class InvokeHostFunctionOp:
    host_function: HostFunction
    auth_count: int = 0
    footprint_read_only: tuple[str, ...] = ()
    footprint_read_write: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExtendFootprintTtlOp:
    extend_to: int
    footprint_read_only: tuple[str, ...] = ()
    footprint_read_write: tuple[str, ...] = ()


@dataclass(frozen=True)
class RestoreFootprintOp:
    footprint_read_only: tuple[str, ...] = ()
    footprint_read_write: tuple[str, ...] = ()


SOROBAN_OPERATION_KINDS = frozenset(
    {
        OperationKind.INVOKE_HOST_FUNCTION,
        OperationKind.EXTEND_FOOTPRINT_TTL,
        OperationKind.RESTORE_FOOTPRINT,
    }
)


def _read_create_account(r: XdrReader) -> CreateAccountOp:
    return CreateAccountOp(read_account_id(r), r.int64())


def _read_payment(r: XdrReader) -> PaymentOp:
    return PaymentOp(read_muxed_account(r), read_asset(r), r.int64())


def _read_path_payment_strict_receive(r: XdrReader) -> PathPaymentStrictReceiveOp:
    return PathPaymentStrictReceiveOp(
        send_asset=read_asset(r),
        send_max=r.int64(),
        destination=read_muxed_account(r),
        dest_asset=read_asset(r),
        dest_amount=r.int64(),
        path=r.array(lambda: read_asset(r), MAX_PATH),
    )


def _read_path_payment_strict_send(r: XdrReader) -> PathPaymentStrictSendOp:
    return PathPaymentStrictSendOp(
        send_asset=read_asset(r),
        send_amount=r.int64(),
        destination=read_muxed_account(r),
        dest_asset=read_asset(r),
        dest_min=r.int64(),
        path=r.array(lambda: read_asset(r), MAX_PATH),
    )


def _read_manage_sell_offer(r: XdrReader) -> ManageSellOfferOp:
    return ManageSellOfferOp(read_asset(r), read_asset(r), r.int64(), read_price(r), r.int64())


def _read_manage_buy_offer(r: XdrReader) -> ManageBuyOfferOp:
    return ManageBuyOfferOp(read_asset(r), read_asset(r), r.int64(), read_price(r), r.int64())


def _read_create_passive_sell_offer(r: XdrReader) -> CreatePassiveSellOfferOp:
    return CreatePassiveSellOfferOp(read_asset(r), read_asset(r), r.int64(), read_price(r))


def _read_set_options(r: XdrReader) -> SetOptionsOp:
    return SetOptionsOp(
        inflation_dest=r.optional(lambda: read_account_id(r)),
        clear_flags=r.optional(r.uint32),
        set_flags=r.optional(r.uint32),
        master_weight=r.optional(r.uint32),
        low_threshold=r.optional(r.uint32),
        med_threshold=r.optional(r.uint32),
        high_threshold=r.optional(r.uint32),
        home_domain=r.optional(lambda: r.string(32)),
        signer=r.optional(lambda: SignerSpec(read_signer_key(r), r.uint32())),
    )


def _read_change_trust(r: XdrReader) -> ChangeTrustOp:
    return ChangeTrustOp(read_change_trust_asset(r), r.int64())


def _read_allow_trust(r: XdrReader) -> AllowTrustOp:
    return AllowTrustOp(read_account_id(r), read_asset_code(r), r.uint32())


def _read_account_merge(r: XdrReader) -> AccountMergeOp:
    return AccountMergeOp(read_muxed_account(r))


def _read_manage_data(r: XdrReader) -> ManageDataOp:
    return ManageDataOp(r.string(64), r.optional(lambda: r.var_opaque(64)))


def _read_create_claimable_balance(r: XdrReader) -> CreateClaimableBalanceOp:
    return CreateClaimableBalanceOp(
        read_asset(r), r.int64(), r.array(lambda: read_claimant(r), MAX_CLAIMANTS)
    )


def _read_revoke_sponsorship(r: XdrReader) -> RevokeSponsorshipOp:
    kind = r.int32()
    if kind == 0:
        return RevokeSponsorshipOp(ledger_key=read_ledger_key(r))
    if kind == 1:
        return RevokeSponsorshipOp(account_id=read_account_id(r), signer_key=read_signer_key(r))
    raise r.unknown("revoke sponsorship", kind)


def _read_clawback(r: XdrReader) -> ClawbackOp:
    return ClawbackOp(read_asset(r), read_muxed_account(r), r.int64())


def _read_set_trust_line_flags(r: XdrReader) -> SetTrustLineFlagsOp:
    return SetTrustLineFlagsOp(read_account_id(r), read_asset(r), r.uint32(), r.uint32())


def _read_liquidity_pool_deposit(r: XdrReader) -> LiquidityPoolDepositOp:
    return LiquidityPoolDepositOp(read_hash_hex(r), r.int64(), r.int64(), read_price(r), read_price(r))


def _read_liquidity_pool_withdraw(r: XdrReader) -> LiquidityPoolWithdrawOp:
    return LiquidityPoolWithdrawOp(read_hash_hex(r), r.int64(), r.int64(), r.int64())


def _read_invoke_contract_args(r: XdrReader) -> tuple[str, str, tuple[ScVal, ...]]:
    address = read_sc_address(r)
    name = r.string(32)
    return address, name, r.array(lambda: read_sc_val(r))


def _read_contract_id_preimage(r: XdrReader) -> None:
    kind = r.int32()
    if kind == 0:
        read_sc_address(r)
        r.fixed_opaque(32)  # salt
    elif kind == 1:
        read_asset(r)
    else:
        raise r.unknown("contract id preimage", kind)


def _read_create_contract_args(r: XdrReader, v2: bool) -> HostFunction:
    _read_contract_id_preimage(r)
    wasm_hash = read_contract_executable(r)
    args = r.array(lambda: read_sc_val(r)) if v2 else ()
    kind = HOST_FUNCTION_CREATE_CONTRACT_V2 if v2 else HOST_FUNCTION_CREATE_CONTRACT
    return HostFunction(kind, args=args, wasm_hash=wasm_hash)


def read_host_function(r: XdrReader) -> HostFunction:
    kind = r.int32()
    if kind == HOST_FUNCTION_INVOKE_CONTRACT:
        address, name, args = _read_invoke_contract_args(r)
        return HostFunction(kind, contract_address=address, function_name=name, args=args)
    if kind == HOST_FUNCTION_CREATE_CONTRACT:
        return _read_create_contract_args(r, v2=False)
    if kind == HOST_FUNCTION_UPLOAD_WASM:
        r.var_opaque()
        return HostFunction(kind)
    if kind == HOST_FUNCTION_CREATE_CONTRACT_V2:
        return _read_create_contract_args(r, v2=True)
    raise r.unknown("host function", kind)


def _read_authorized_invocation(r: XdrReader, depth: int = 0) -> None:
    if depth > 32:
        raise r.error("authorized invocation nested too deeply")
    kind = r.int32()
    if kind == 0:
        _read_invoke_contract_args(r)
    elif kind == 1:
        _read_create_contract_args(r, v2=False)
    elif kind == 2:
        _read_create_contract_args(r, v2=True)
    else:
        raise r.unknown("authorized function", kind)
    r.array(lambda: _read_authorized_invocation(r, depth + 1))


def _read_auth_entry(r: XdrReader) -> None:
    credentials = r.int32()
    if credentials == 1:
        read_sc_address(r)
        r.int64()  # nonce
        r.uint32()  # signatureExpirationLedger
        read_sc_val(r)
    elif credentials != 0:
        raise r.unknown("soroban credentials", credentials)
    _read_authorized_invocation(r)


def _read_invoke_host_function(r: XdrReader) -> InvokeHostFunctionOp:
    host_function = read_host_function(r)
    auth = r.array(lambda: _read_auth_entry(r))
    return InvokeHostFunctionOp(host_function, auth_count=len(auth))


def _read_extend_footprint_ttl(r: XdrReader) -> ExtendFootprintTtlOp:
    r.extension_point()
    return ExtendFootprintTtlOp(r.uint32())


def _read_restore_footprint(r: XdrReader) -> RestoreFootprintOp:
    r.extension_point()
    return RestoreFootprintOp()


_BODY_READERS: dict[OperationKind, Callable[[XdrReader], Any]] = {
    OperationKind.CREATE_ACCOUNT: _read_create_account,
    OperationKind.PAYMENT: _read_payment,
    OperationKind.PATH_PAYMENT_STRICT_RECEIVE: _read_path_payment_strict_receive,
    OperationKind.MANAGE_SELL_OFFER: _read_manage_sell_offer,
    OperationKind.CREATE_PASSIVE_SELL_OFFER: _read_create_passive_sell_offer,
    OperationKind.SET_OPTIONS: _read_set_options,
    OperationKind.CHANGE_TRUST: _read_change_trust,
    OperationKind.ALLOW_TRUST: _read_allow_trust,
    OperationKind.ACCOUNT_MERGE: _read_account_merge,
    OperationKind.INFLATION: lambda r: InflationOp(),
    OperationKind.MANAGE_DATA: _read_manage_data,
    OperationKind.BUMP_SEQUENCE: lambda r: BumpSequenceOp(r.int64()),
    OperationKind.MANAGE_BUY_OFFER: _read_manage_buy_offer,
    OperationKind.PATH_PAYMENT_STRICT_SEND: _read_path_payment_strict_send,
    OperationKind.CREATE_CLAIMABLE_BALANCE: _read_create_claimable_balance,
    OperationKind.CLAIM_CLAIMABLE_BALANCE: lambda r: ClaimClaimableBalanceOp(read_claimable_balance_id(r)),
    OperationKind.BEGIN_SPONSORING_FUTURE_RESERVES: lambda r: BeginSponsoringFutureReservesOp(read_account_id(r)),
    OperationKind.END_SPONSORING_FUTURE_RESERVES: lambda r: EndSponsoringFutureReservesOp(),
    OperationKind.REVOKE_SPONSORSHIP: _read_revoke_sponsorship,
    OperationKind.CLAWBACK: _read_clawback,
    OperationKind.CLAWBACK_CLAIMABLE_BALANCE: lambda r: ClawbackClaimableBalanceOp(read_claimable_balance_id(r)),
    OperationKind.SET_TRUST_LINE_FLAGS: _read_set_trust_line_flags,
    OperationKind.LIQUIDITY_POOL_DEPOSIT: _read_liquidity_pool_deposit,
    OperationKind.LIQUIDITY_POOL_WITHDRAW: _read_liquidity_pool_withdraw,
    OperationKind.INVOKE_HOST_FUNCTION: _read_invoke_host_function,
    OperationKind.EXTEND_FOOTPRINT_TTL: _read_extend_footprint_ttl,
    OperationKind.RESTORE_FOOTPRINT: _read_restore_footprint,
}


def read_operation_kind(r: XdrReader) -> OperationKind:
    raw = r.int32()
    try:
        return OperationKind(raw)
    except ValueError:
        raise r.unknown("operation type", raw) from None


def read_operation(r: XdrReader, index: int) -> EnvelopeOperation:
    source = r.optional(lambda: read_muxed_account(r))
    kind = read_operation_kind(r)
    body = _BODY_READERS[kind](r)
    return EnvelopeOperation(index=index, kind=kind, source_account=source, body=body)
