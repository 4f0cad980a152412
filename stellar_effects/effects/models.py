"""
Effect values: EffectDraft (what a derivation produces) and EffectRecord
(a draft with identifiers and ledger context, ready to serialize).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from stellar_effects.core.exceptions import ProcessingError
from stellar_effects.decoder.models import MuxedAccount
from stellar_effects.effects.details import EFFECT_DETAILS, EffectDetails
from stellar_effects.effects.effect_types import EffectType


@dataclass(frozen=True)
class EffectDraft:
    effect_type: EffectType
    address: str
    details: EffectDetails
    address_muxed: str | None = None

    def __post_init__(self) -> None:
        expected = EFFECT_DETAILS[self.effect_type]
        if not isinstance(self.details, expected):
            raise ProcessingError(
                f"{self.effect_type.type_string} expects {expected.__name__}, "
                f"got {type(self.details).__name__}"
            ).with_context("effect_type", self.effect_type.type_string)

    @classmethod
    def for_account(cls, effect_type: EffectType, account: MuxedAccount, details: EffectDetails) -> EffectDraft:
        """Draft addressed to a (possibly muxed) account."""
        return cls(effect_type, account.address, details, account.muxed_address)


def format_closed_at(closed_at: datetime) -> str:
    """RFC 3339 in UTC with a Z suffix."""
    if closed_at.tzinfo is None:
        closed_at = closed_at.replace(tzinfo=timezone.utc)
    return closed_at.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True)
class EffectRecord:
    address: str
    operation_id: int
    details: EffectDetails
    effect_type: EffectType
    closed_at: datetime
    ledger_sequence: int
    index: int
    id: str
    address_muxed: str | None = None

    @property
    def type_string(self) -> str:
        return self.effect_type.type_string

    def to_dict(self) -> dict[str, Any]:
        """Wire form; address_muxed is omitted when absent."""
        out: dict[str, Any] = {"address": self.address}
        if self.address_muxed:
            out["address_muxed"] = self.address_muxed
        out.update(
            {
                "operation_id": self.operation_id,
                "details": self.details.to_dict(),
                "type": int(self.effect_type),
                "type_string": self.type_string,
                "closed_at": format_closed_at(self.closed_at),
                "ledger_sequence": self.ledger_sequence,
                "index": self.index,
                "id": self.id,
            }
        )
        return out
