"""
Effect details as a closed set of frozen dataclasses.

Derivation code builds one of these per effect; they are flattened to plain
mappings only when the record is serialized (to_dict). EFFECT_DETAILS maps
every effect type to the one details class it accepts.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Union

from stellar_effects.decoder.models import Asset, ClaimPredicate, LiquidityPoolState, Price
from stellar_effects.effects.effect_types import EffectType
from stellar_effects.utils.amounts import format_amount


def _drop_none(values: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}


@dataclass(frozen=True)
class BalanceChangeDetails:
    """account_credited / account_debited."""

    asset: Asset
    amount: int

    def to_dict(self) -> dict[str, Any]:
        out = self.asset.to_details()
        out["amount"] = format_amount(self.amount)
        return out


@dataclass(frozen=True)
class AccountCreatedDetails:
    starting_balance: int

    def to_dict(self) -> dict[str, Any]:
        return {"starting_balance": format_amount(self.starting_balance)}


@dataclass(frozen=True)
class EmptyDetails:
    def to_dict(self) -> dict[str, Any]:
        return {}


@dataclass(frozen=True)
class ThresholdsDetails:
    low_threshold: int | None = None
    med_threshold: int | None = None
    high_threshold: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "low_threshold": self.low_threshold,
                "med_threshold": self.med_threshold,
                "high_threshold": self.high_threshold,
            }
        )


@dataclass(frozen=True)
class HomeDomainDetails:
    home_domain: str

    def to_dict(self) -> dict[str, Any]:
        return {"home_domain": self.home_domain}


@dataclass(frozen=True)
class AccountFlagsDetails:
    """Only flags the operation touched are set; True = set, False = cleared."""

    auth_required: bool | None = None
    auth_revocable: bool | None = None
    auth_immutable: bool | None = None
    auth_clawback_enabled: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "auth_required_flag": self.auth_required,
                "auth_revocable_flag": self.auth_revocable,
                "auth_immutable_flag": self.auth_immutable,
                "auth_clawback_enabled_flag": self.auth_clawback_enabled,
            }
        )


@dataclass(frozen=True)
class InflationDestinationDetails:
    inflation_destination: str

    def to_dict(self) -> dict[str, Any]:
        return {"inflation_destination": self.inflation_destination}


@dataclass(frozen=True)
class SignerDetails:
    public_key: str
    weight: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({"public_key": self.public_key, "weight": self.weight})


@dataclass(frozen=True)
class TrustlineDetails:
    asset: Asset
    limit: int

    def to_dict(self) -> dict[str, Any]:
        out = self.asset.to_details()
        out["limit"] = format_amount(self.limit)
        return out


@dataclass(frozen=True)
class TrustlineFlagsDetails:
    trustor: str
    asset: Asset
    authorized: bool | None = None
    authorized_to_maintain_liabilities: bool | None = None
    clawback_enabled: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        out = {"trustor": self.trustor}
        out.update(self.asset.to_details())
        out.update(
            _drop_none(
                {
                    "authorized_flag": self.authorized,
                    "authorized_to_maintain_liabilities_flag": self.authorized_to_maintain_liabilities,
                    "clawback_enabled_flag": self.clawback_enabled,
                }
            )
        )
        return out


@dataclass(frozen=True)
class OfferDetails:
    offer_id: int
    selling: Asset
    buying: Asset
    amount: int
    price: Price

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "offer_id": self.offer_id,
            "amount": format_amount(self.amount),
            "price": self.price.to_string(),
            "price_r": self.price.to_dict(),
        }
        out.update(self.selling.to_details("selling_"))
        out.update(self.buying.to_details("buying_"))
        return out


@dataclass(frozen=True)
class TradeDetails:
    """A match against a counter-offer, from the taker's point of view."""

    seller: str
    offer_id: int
    sold_asset: Asset
    sold_amount: int
    bought_asset: Asset
    bought_amount: int

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "seller": self.seller,
            "offer_id": self.offer_id,
            "sold_amount": format_amount(self.sold_amount),
            "bought_amount": format_amount(self.bought_amount),
        }
        out.update(self.sold_asset.to_details("sold_"))
        out.update(self.bought_asset.to_details("bought_"))
        return out


@dataclass(frozen=True)
class DataDetails:
    name: str
    value: bytes | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name}
        if self.value is not None:
            out["value"] = base64.b64encode(self.value).decode("ascii")
        return out


@dataclass(frozen=True)
class SequenceBumpedDetails:
    new_seq: int

    def to_dict(self) -> dict[str, Any]:
        return {"new_seq": self.new_seq}


@dataclass(frozen=True)
class ClaimableBalanceDetails:
    """claimable_balance_created / claimed / clawed_back."""

    balance_id: str
    asset: Asset
    amount: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "balance_id": self.balance_id,
            "asset": self.asset.canonical(),
            "amount": format_amount(self.amount),
        }


@dataclass(frozen=True)
class ClaimantDetails:
    balance_id: str
    asset: Asset
    amount: int
    predicate: ClaimPredicate

    def to_dict(self) -> dict[str, Any]:
        return {
            "balance_id": self.balance_id,
            "asset": self.asset.canonical(),
            "amount": format_amount(self.amount),
            "predicate": self.predicate.to_json(),
        }


@dataclass(frozen=True)
class SponsorshipDetails:
    """
    Sponsor fields follow the transition: sponsor (created), former_sponsor
    (removed), former_sponsor + new_sponsor (updated). The remaining fields
    identify the sponsored entry.
    """

    sponsor: str | None = None
    former_sponsor: str | None = None
    new_sponsor: str | None = None
    balance_id: str | None = None
    data_name: str | None = None
    asset: str | None = None
    asset_type: str | None = None
    liquidity_pool_id: str | None = None
    signer: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "sponsor": self.sponsor,
                "former_sponsor": self.former_sponsor,
                "new_sponsor": self.new_sponsor,
                "balance_id": self.balance_id,
                "data_name": self.data_name,
                "asset": self.asset,
                "asset_type": self.asset_type,
                "liquidity_pool_id": self.liquidity_pool_id,
                "signer": self.signer,
            }
        )


@dataclass(frozen=True)
class AssetAmount:
    asset: Asset
    amount: int
    claimable_balance_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "asset": self.asset.canonical(),
                "amount": format_amount(self.amount),
                "claimable_balance_id": self.claimable_balance_id,
            }
        )


def pool_to_dict(pool: LiquidityPoolState) -> dict[str, Any]:
    return {
        "id": pool.pool_id,
        "fee_bp": pool.fee_bp,
        "type": "constant_product",
        "total_trustlines": str(pool.trustline_count),
        "total_shares": format_amount(pool.total_shares),
        "reserves": [
            AssetAmount(pool.asset_a, pool.reserve_a).to_dict(),
            AssetAmount(pool.asset_b, pool.reserve_b).to_dict(),
        ],
    }


@dataclass(frozen=True)
class LiquidityPoolDetails:
    """liquidity_pool_created: snapshot of the new pool."""

    pool: LiquidityPoolState

    def to_dict(self) -> dict[str, Any]:
        return {"liquidity_pool": pool_to_dict(self.pool)}


@dataclass(frozen=True)
class LiquidityPoolRemovedDetails:
    liquidity_pool_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"liquidity_pool_id": self.liquidity_pool_id}


@dataclass(frozen=True)
class LiquidityPoolDepositedDetails:
    pool: LiquidityPoolState
    reserves_deposited: tuple[AssetAmount, AssetAmount]
    shares_received: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "liquidity_pool": pool_to_dict(self.pool),
            "reserves_deposited": [r.to_dict() for r in self.reserves_deposited],
            "shares_received": format_amount(self.shares_received),
        }


@dataclass(frozen=True)
class LiquidityPoolWithdrewDetails:
    pool: LiquidityPoolState
    reserves_received: tuple[AssetAmount, AssetAmount]
    shares_redeemed: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "liquidity_pool": pool_to_dict(self.pool),
            "reserves_received": [r.to_dict() for r in self.reserves_received],
            "shares_redeemed": format_amount(self.shares_redeemed),
        }


@dataclass(frozen=True)
class LiquidityPoolTradeDetails:
    pool: LiquidityPoolState | None
    liquidity_pool_id: str
    sold: AssetAmount
    bought: AssetAmount

    def to_dict(self) -> dict[str, Any]:
        pool = pool_to_dict(self.pool) if self.pool else {"id": self.liquidity_pool_id}
        return {"liquidity_pool": pool, "sold": self.sold.to_dict(), "bought": self.bought.to_dict()}


@dataclass(frozen=True)
class LiquidityPoolRevokedDetails:
    pool: LiquidityPoolState
    reserves_revoked: tuple[AssetAmount, ...]
    shares_revoked: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "liquidity_pool": pool_to_dict(self.pool),
            "reserves_revoked": [r.to_dict() for r in self.reserves_revoked],
            "shares_revoked": format_amount(self.shares_revoked),
        }


@dataclass(frozen=True)
class ContractBalanceDetails:
    """contract_credited / contract_debited for a Stellar Asset Contract balance."""

    contract: str
    asset_contract: str
    amount: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "contract": self.contract,
            "asset_contract": self.asset_contract,
            "amount": format_amount(self.amount),
        }


@dataclass(frozen=True)
class FootprintDetails:
    entries: tuple[str, ...]
    extend_to: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({"entries": list(self.entries), "extend_to": self.extend_to})


EffectDetails = Union[
    BalanceChangeDetails,
    AccountCreatedDetails,
    EmptyDetails,
    ThresholdsDetails,
    HomeDomainDetails,
    AccountFlagsDetails,
    InflationDestinationDetails,
    SignerDetails,
    TrustlineDetails,
    TrustlineFlagsDetails,
    OfferDetails,
    TradeDetails,
    DataDetails,
    SequenceBumpedDetails,
    ClaimableBalanceDetails,
    ClaimantDetails,
    SponsorshipDetails,
    LiquidityPoolDetails,
    LiquidityPoolRemovedDetails,
    LiquidityPoolDepositedDetails,
    LiquidityPoolWithdrewDetails,
    LiquidityPoolTradeDetails,
    LiquidityPoolRevokedDetails,
    ContractBalanceDetails,
    FootprintDetails,
]

_SPONSORSHIP_TYPES = [t for t in EffectType if "_SPONSORSHIP_" in t.name]

EFFECT_DETAILS: MappingProxyType[EffectType, type] = MappingProxyType(
    {
        EffectType.ACCOUNT_CREATED: AccountCreatedDetails,
        EffectType.ACCOUNT_REMOVED: EmptyDetails,
        EffectType.ACCOUNT_CREDITED: BalanceChangeDetails,
        EffectType.ACCOUNT_DEBITED: BalanceChangeDetails,
        EffectType.ACCOUNT_THRESHOLDS_UPDATED: ThresholdsDetails,
        EffectType.ACCOUNT_HOME_DOMAIN_UPDATED: HomeDomainDetails,
        EffectType.ACCOUNT_FLAGS_UPDATED: AccountFlagsDetails,
        EffectType.ACCOUNT_INFLATION_DESTINATION_UPDATED: InflationDestinationDetails,
        EffectType.SIGNER_CREATED: SignerDetails,
        EffectType.SIGNER_REMOVED: SignerDetails,
        EffectType.SIGNER_UPDATED: SignerDetails,
        EffectType.TRUSTLINE_CREATED: TrustlineDetails,
        EffectType.TRUSTLINE_REMOVED: TrustlineDetails,
        EffectType.TRUSTLINE_UPDATED: TrustlineDetails,
        EffectType.TRUSTLINE_FLAGS_UPDATED: TrustlineFlagsDetails,
        EffectType.OFFER_CREATED: OfferDetails,
        EffectType.OFFER_REMOVED: OfferDetails,
        EffectType.OFFER_UPDATED: OfferDetails,
        EffectType.TRADE: TradeDetails,
        EffectType.DATA_CREATED: DataDetails,
        EffectType.DATA_REMOVED: DataDetails,
        EffectType.DATA_UPDATED: DataDetails,
        EffectType.SEQUENCE_BUMPED: SequenceBumpedDetails,
        EffectType.CLAIMABLE_BALANCE_CREATED: ClaimableBalanceDetails,
        EffectType.CLAIMABLE_BALANCE_CLAIMANT_CREATED: ClaimantDetails,
        EffectType.CLAIMABLE_BALANCE_CLAIMED: ClaimableBalanceDetails,
        **{t: SponsorshipDetails for t in _SPONSORSHIP_TYPES},
        EffectType.CLAIMABLE_BALANCE_CLAWED_BACK: ClaimableBalanceDetails,
        EffectType.LIQUIDITY_POOL_DEPOSITED: LiquidityPoolDepositedDetails,
        EffectType.LIQUIDITY_POOL_WITHDREW: LiquidityPoolWithdrewDetails,
        EffectType.LIQUIDITY_POOL_TRADE: LiquidityPoolTradeDetails,
        EffectType.LIQUIDITY_POOL_CREATED: LiquidityPoolDetails,
        EffectType.LIQUIDITY_POOL_REMOVED: LiquidityPoolRemovedDetails,
        EffectType.LIQUIDITY_POOL_REVOKED: LiquidityPoolRevokedDetails,
        EffectType.CONTRACT_CREDITED: ContractBalanceDetails,
        EffectType.CONTRACT_DEBITED: ContractBalanceDetails,
        EffectType.EXTEND_FOOTPRINT_TTL: FootprintDetails,
        EffectType.RESTORE_FOOTPRINT: FootprintDetails,
    }
)

_missing = set(EffectType) - set(EFFECT_DETAILS)
if _missing:
    raise RuntimeError(f"effect types without a details class: {sorted(_missing)}")
