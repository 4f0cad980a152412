"""
Data models for decoded Stellar transactions.

Immutable dataclasses for assets, addresses, ledger-entry snapshots, operation
results and the Transaction value produced by the decoder. Nothing here knows
about effects; operation bodies live in decoder.operations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any

from stellar_effects.utils.amounts import format_price

ASSET_TYPE_NATIVE = "native"
ASSET_TYPE_CREDIT_ALPHANUM4 = "credit_alphanum4"
ASSET_TYPE_CREDIT_ALPHANUM12 = "credit_alphanum12"
ASSET_TYPE_POOL_SHARE = "liquidity_pool_shares"


@dataclass(frozen=True)
class Asset:
    """Classic asset, or a pool-share line (asset_type liquidity_pool_shares)."""

    asset_type: str
    code: str | None = None
    issuer: str | None = None
    liquidity_pool_id: str | None = None

    @classmethod
    def native(cls) -> Asset:
        return cls(ASSET_TYPE_NATIVE)

    @classmethod
    def pool_share(cls, pool_id: str) -> Asset:
        return cls(ASSET_TYPE_POOL_SHARE, liquidity_pool_id=pool_id)

    @property
    def is_native(self) -> bool:
        return self.asset_type == ASSET_TYPE_NATIVE

    @property
    def is_pool_share(self) -> bool:
        return self.asset_type == ASSET_TYPE_POOL_SHARE

    def canonical(self) -> str:
        """'native', 'CODE:ISSUER', or the pool id for pool-share lines."""
        if self.is_native:
            return "native"
        if self.is_pool_share:
            return self.liquidity_pool_id or ""
        return f"{self.code}:{self.issuer}"

    def to_details(self, prefix: str = "") -> dict[str, Any]:
        out: dict[str, Any] = {f"{prefix}asset_type": self.asset_type}
        if self.is_pool_share:
            out[f"{prefix}liquidity_pool_id"] = self.liquidity_pool_id
        elif not self.is_native:
            out[f"{prefix}asset_code"] = self.code
            out[f"{prefix}asset_issuer"] = self.issuer
        return out


@dataclass(frozen=True)
class MuxedAccount:
    """Account address; muxed_address/muxed_id are set only for M-addresses."""

    address: str
    muxed_address: str | None = None
    muxed_id: int | None = None


@dataclass(frozen=True)
class Price:
    n: int
    d: int

    def to_string(self) -> str:
        return format_price(self.n, self.d)

    def to_dict(self) -> dict[str, int]:
        return {"n": self.n, "d": self.d}


PREDICATE_UNCONDITIONAL = "unconditional"
PREDICATE_AND = "and"
PREDICATE_OR = "or"
PREDICATE_NOT = "not"
PREDICATE_ABS_BEFORE = "abs_before"
PREDICATE_REL_BEFORE = "rel_before"


@dataclass(frozen=True)
class ClaimPredicate:
    kind: str
    children: tuple[ClaimPredicate, ...] = ()
    value: int | None = None

    def to_json(self) -> dict[str, Any]:
        """Predicate as JSON the way Horizon renders it."""
        if self.kind == PREDICATE_UNCONDITIONAL:
            return {"unconditional": True}
        if self.kind in (PREDICATE_AND, PREDICATE_OR):
            return {self.kind: [c.to_json() for c in self.children]}
        if self.kind == PREDICATE_NOT:
            return {"not": self.children[0].to_json() if self.children else None}
        if self.kind == PREDICATE_ABS_BEFORE:
            return {
                "abs_before": _epoch_to_rfc3339(self.value or 0),
                "abs_before_epoch": str(self.value),
            }
        return {"rel_before": str(self.value)}


def _epoch_to_rfc3339(epoch: int) -> str:
    try:
        return datetime.fromtimestamp(epoch, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    except (OverflowError, OSError, ValueError):
        # Far-future predicates beyond datetime range
        return datetime.max.replace(tzinfo=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True)
class Claimant:
    destination: str
    predicate: ClaimPredicate


@dataclass(frozen=True)
class ScVal:
    """
    Soroban value. value holds a plain Python form: int/bool/str/bytes, a tuple of
    ScVal for vectors, a tuple of (key, value) pairs for maps, a strkey for addresses.
    """

    type_code: int
    value: Any = None


class EntryType(IntEnum):
    ACCOUNT = 0
    TRUSTLINE = 1
    OFFER = 2
    DATA = 3
    CLAIMABLE_BALANCE = 4
    LIQUIDITY_POOL = 5
    CONTRACT_DATA = 6
    CONTRACT_CODE = 7
    CONFIG_SETTING = 8
    TTL = 9


@dataclass(frozen=True, order=True)
class EntryKey:
    """Ledger entry identity: (entry type, canonical key id)."""

    entry_type: EntryType
    key_id: str


@dataclass(frozen=True)
class Signer:
    key: str
    weight: int
    sponsor: str | None = None


@dataclass(frozen=True)
class AccountState:
    account_id: str
    balance: int
    sequence: int
    num_sub_entries: int
    inflation_dest: str | None
    flags: int
    home_domain: str
    master_weight: int
    low_threshold: int
    med_threshold: int
    high_threshold: int
    signers: tuple[Signer, ...] = ()

    def signer_summary(self) -> dict[str, int]:
        """Signer key -> weight, master key included when its weight is non-zero."""
        summary = {s.key: s.weight for s in self.signers}
        if self.master_weight > 0:
            summary[self.account_id] = self.master_weight
        return summary

    def signer_sponsors(self) -> dict[str, str]:
        """Signer key -> sponsoring account, for sponsored signers only."""
        return {s.key: s.sponsor for s in self.signers if s.sponsor}


TRUSTLINE_AUTHORIZED = 1
TRUSTLINE_AUTHORIZED_TO_MAINTAIN_LIABILITIES = 2
TRUSTLINE_CLAWBACK_ENABLED = 4


@dataclass(frozen=True)
class TrustlineState:
    account_id: str
    asset: Asset
    balance: int
    limit: int
    flags: int


@dataclass(frozen=True)
class OfferState:
    seller_id: str
    offer_id: int
    selling: Asset
    buying: Asset
    amount: int
    price: Price
    flags: int


@dataclass(frozen=True)
class DataState:
    account_id: str
    name: str
    value: bytes


@dataclass(frozen=True)
class ClaimableBalanceState:
    balance_id: str
    claimants: tuple[Claimant, ...]
    asset: Asset
    amount: int
    flags: int = 0


@dataclass(frozen=True)
class LiquidityPoolState:
    pool_id: str
    asset_a: Asset
    asset_b: Asset
    fee_bp: int
    reserve_a: int
    reserve_b: int
    total_shares: int
    trustline_count: int


@dataclass(frozen=True)
class ContractBalanceState:
    """Stellar Asset Contract balance: contract data ["Balance", holder] -> {amount: i128}."""

    contract_id: str
    holder: str
    amount: int


@dataclass(frozen=True)
class TtlState:
    key_hash: str
    live_until_ledger: int


@dataclass(frozen=True)
class EntrySnapshot:
    key: EntryKey
    data: Any
    last_modified_ledger: int = 0
    sponsor: str | None = None

    @property
    def owner(self) -> str:
        """Account, pool, balance or contract that the entry belongs to."""
        data = self.data
        if isinstance(data, (AccountState, TrustlineState, DataState)):
            return data.account_id
        if isinstance(data, OfferState):
            return data.seller_id
        if isinstance(data, ClaimableBalanceState):
            return data.balance_id
        if isinstance(data, LiquidityPoolState):
            return data.pool_id
        if isinstance(data, ContractBalanceState):
            return data.holder
        if isinstance(data, TtlState):
            return data.key_hash
        return self.key.key_id


class ChangeType(IntEnum):
    CREATED = 0
    UPDATED = 1
    REMOVED = 2
    STATE = 3
    RESTORED = 4


@dataclass(frozen=True)
class LedgerEntryChange:
    """One meta change record; snapshot is None for REMOVED."""

    change_type: ChangeType
    key: EntryKey
    snapshot: EntrySnapshot | None = None


@dataclass(frozen=True)
class ClaimAtom:
    """One match during offer crossing: an order-book offer or a liquidity pool."""

    asset_sold: Asset
    amount_sold: int
    asset_bought: Asset
    amount_bought: int
    seller_id: str | None = None
    offer_id: int | None = None
    liquidity_pool_id: str | None = None

    @property
    def is_liquidity_pool(self) -> bool:
        return self.liquidity_pool_id is not None


@dataclass(frozen=True)
class SimplePaymentResult:
    destination: str
    asset: Asset
    amount: int


@dataclass(frozen=True)
class PathPaymentSuccess:
    claims: tuple[ClaimAtom, ...]
    last: SimplePaymentResult


MANAGE_OFFER_CREATED = 0
MANAGE_OFFER_UPDATED = 1
MANAGE_OFFER_DELETED = 2


@dataclass(frozen=True)
class ManageOfferSuccess:
    claims: tuple[ClaimAtom, ...]
    offer_effect: int
    offer: OfferState | None = None


@dataclass(frozen=True)
class AccountMergeSuccess:
    source_account_balance: int


@dataclass(frozen=True)
class InflationPayout:
    destination: str
    amount: int


@dataclass(frozen=True)
class InflationSuccess:
    payouts: tuple[InflationPayout, ...]


@dataclass(frozen=True)
class CreateClaimableBalanceSuccess:
    balance_id: str


@dataclass(frozen=True)
class InvokeHostFunctionSuccess:
    result_hash: str


OP_INNER = 0


@dataclass(frozen=True)
class OperationResult:
    """
    code: operation-level code (opINNER = 0); inner_code: operation-specific code
    (0 = success). payload carries the success arm where one exists.
    """

    code: int
    operation_kind: int | None = None
    inner_code: int | None = None
    payload: Any = None

    @property
    def successful(self) -> bool:
        return self.code == OP_INNER and self.inner_code == 0


TX_SUCCESS = 0
TX_FAILED = -1
TX_FEE_BUMP_INNER_SUCCESS = 1
TX_FEE_BUMP_INNER_FAILED = -13


@dataclass(frozen=True)
class TransactionResult:
    fee_charged: int
    code: int
    operation_results: tuple[OperationResult, ...] | None
    inner_code: int | None = None

    @property
    def successful(self) -> bool:
        if self.code == TX_FEE_BUMP_INNER_SUCCESS:
            return self.inner_code == TX_SUCCESS
        return self.code == TX_SUCCESS


@dataclass(frozen=True)
class TransactionMeta:
    version: int
    changes_before: tuple[LedgerEntryChange, ...]
    operation_changes: tuple[tuple[LedgerEntryChange, ...], ...]
    changes_after: tuple[LedgerEntryChange, ...] = ()


@dataclass(frozen=True)
class EnvelopeOperation:
    """Operation as it appears in the envelope, before pairing with a result."""

    index: int
    kind: int
    source_account: MuxedAccount | None
    body: Any


@dataclass(frozen=True)
class Operation:
    """Walked operation: source resolved, result attached, success flag set."""

    index: int
    kind: int
    source_account: MuxedAccount
    body: Any
    result: OperationResult | None = None
    successful: bool = False

    @property
    def source_address(self) -> str:
        return self.source_account.address


@dataclass(frozen=True)
class Transaction:
    """Decoded transaction; immutable once built."""

    hash: str
    source_account: MuxedAccount
    operations: tuple[EnvelopeOperation, ...]
    result: TransactionResult
    meta: TransactionMeta
    ledger_sequence: int
    close_time: datetime
    network_passphrase: str
    is_fee_bump: bool = False
    fee_source: MuxedAccount | None = None
    sequence: int = 0
    memo: Any = None
    footprint_read_only: tuple[str, ...] = field(default=())
    footprint_read_write: tuple[str, ...] = field(default=())

    @property
    def successful(self) -> bool:
        return self.result.successful
