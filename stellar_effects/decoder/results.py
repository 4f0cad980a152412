"""
TransactionResultPair decoding.

Fee-bump results are unwrapped to the inner transaction's result. Operation
results keep the success arms that effect derivation reads (claimed offers,
last payment, merged balance, inflation payouts, created balance id).
"""

from __future__ import annotations

from stellar_effects.decoder.models import (
    MANAGE_OFFER_CREATED,
    MANAGE_OFFER_DELETED,
    MANAGE_OFFER_UPDATED,
    OP_INNER,
    TX_FAILED,
    TX_FEE_BUMP_INNER_FAILED,
    TX_FEE_BUMP_INNER_SUCCESS,
    TX_SUCCESS,
    AccountMergeSuccess,
    ClaimAtom,
    CreateClaimableBalanceSuccess,
    InflationPayout,
    InflationSuccess,
    InvokeHostFunctionSuccess,
    ManageOfferSuccess,
    OperationResult,
    PathPaymentSuccess,
    SimplePaymentResult,
    TransactionResult,
)
from stellar_effects.decoder.ledger_entries import read_offer_entry
from stellar_effects.decoder.operations import OperationKind, read_operation_kind
from stellar_effects.decoder.types import (
    read_account_id,
    read_asset,
    read_claimable_balance_id,
    read_ed25519,
    read_hash_hex,
)
from stellar_effects.decoder.xdr_reader import XdrReader
from stellar_effects.utils import strkey

PATH_PAYMENT_NO_ISSUER = -9

CLAIM_ATOM_V0 = 0
CLAIM_ATOM_ORDER_BOOK = 1
CLAIM_ATOM_LIQUIDITY_POOL = 2


def read_claim_atom(r: XdrReader) -> ClaimAtom:
    kind = r.int32()
    if kind == CLAIM_ATOM_V0:
        seller = strkey.encode_account_id(read_ed25519(r))
        offer_id = r.int64()
    elif kind == CLAIM_ATOM_ORDER_BOOK:
        seller = read_account_id(r)
        offer_id = r.int64()
    elif kind == CLAIM_ATOM_LIQUIDITY_POOL:
        pool_id = read_hash_hex(r)
        asset_sold = read_asset(r)
        amount_sold = r.int64()
        asset_bought = read_asset(r)
        return ClaimAtom(asset_sold, amount_sold, asset_bought, r.int64(), liquidity_pool_id=pool_id)
    else:
        raise r.unknown("claim atom", kind)
    asset_sold = read_asset(r)
    amount_sold = r.int64()
    asset_bought = read_asset(r)
    amount_bought = r.int64()
    return ClaimAtom(asset_sold, amount_sold, asset_bought, amount_bought, seller_id=seller, offer_id=offer_id)


def _read_path_payment_success(r: XdrReader) -> PathPaymentSuccess:
    claims = r.array(lambda: read_claim_atom(r))
    last = SimplePaymentResult(read_account_id(r), read_asset(r), r.int64())
    return PathPaymentSuccess(claims, last)


def _read_manage_offer_success(r: XdrReader) -> ManageOfferSuccess:
    claims = r.array(lambda: read_claim_atom(r))
    effect = r.int32()
    if effect in (MANAGE_OFFER_CREATED, MANAGE_OFFER_UPDATED):
        return ManageOfferSuccess(claims, effect, read_offer_entry(r))
    if effect == MANAGE_OFFER_DELETED:
        return ManageOfferSuccess(claims, effect)
    raise r.unknown("manage offer effect", effect)


def _read_inner_result(r: XdrReader, kind: OperationKind) -> OperationResult:
    code = r.int32()
    payload = None
    if kind in (OperationKind.PATH_PAYMENT_STRICT_RECEIVE, OperationKind.PATH_PAYMENT_STRICT_SEND):
        if code == 0:
            payload = _read_path_payment_success(r)
        elif code == PATH_PAYMENT_NO_ISSUER:
            read_asset(r)
    elif kind in (
        OperationKind.MANAGE_SELL_OFFER,
        OperationKind.MANAGE_BUY_OFFER,
        OperationKind.CREATE_PASSIVE_SELL_OFFER,
    ):
        if code == 0:
            payload = _read_manage_offer_success(r)
    elif kind == OperationKind.ACCOUNT_MERGE:
        if code == 0:
            payload = AccountMergeSuccess(r.int64())
    elif kind == OperationKind.INFLATION:
        if code == 0:
            payouts = r.array(lambda: InflationPayout(read_account_id(r), r.int64()))
            payload = InflationSuccess(payouts)
    elif kind == OperationKind.CREATE_CLAIMABLE_BALANCE:
        if code == 0:
            payload = CreateClaimableBalanceSuccess(read_claimable_balance_id(r))
    elif kind == OperationKind.INVOKE_HOST_FUNCTION:
        if code == 0:
            payload = InvokeHostFunctionSuccess(read_hash_hex(r))
    return OperationResult(code=OP_INNER, operation_kind=int(kind), inner_code=code, payload=payload)


def read_operation_result(r: XdrReader) -> OperationResult:
    code = r.int32()
    if code != OP_INNER:
        # opBAD_AUTH, opNO_ACCOUNT, ... carry no body
        return OperationResult(code=code)
    kind = read_operation_kind(r)
    return _read_inner_result(r, kind)


def _read_operation_results(r: XdrReader, code: int) -> tuple[OperationResult, ...] | None:
    if code in (TX_SUCCESS, TX_FAILED):
        return r.array(lambda: read_operation_result(r))
    return None


def read_transaction_result(r: XdrReader) -> TransactionResult:
    fee_charged = r.int64()
    code = r.int32()
    inner_code = None
    if code in (TX_FEE_BUMP_INNER_SUCCESS, TX_FEE_BUMP_INNER_FAILED):
        read_hash_hex(r)  # inner transaction hash
        r.int64()  # inner feeCharged
        inner_code = r.int32()
        results = _read_operation_results(r, inner_code)
        r.extension_point()
    else:
        results = _read_operation_results(r, code)
    r.extension_point()
    return TransactionResult(
        fee_charged=fee_charged,
        code=code,
        operation_results=results,
        inner_code=inner_code,
    )


def read_transaction_result_pair(r: XdrReader) -> tuple[str, TransactionResult]:
    """TransactionResultPair -> (transaction hash hex, result)."""
    tx_hash = read_hash_hex(r)
    return tx_hash, read_transaction_result(r)
