"""Effect taxonomy, records and the per-operation derivations."""

from stellar_effects.effects.effect_types import EffectType, effect_type_from_name, effect_type_name
from stellar_effects.effects.models import EffectDraft, EffectRecord
from stellar_effects.effects.table import DERIVATION_TABLE, derive_effects

__all__ = [
    "DERIVATION_TABLE",
    "EffectDraft",
    "EffectRecord",
    "EffectType",
    "derive_effects",
    "effect_type_from_name",
    "effect_type_name",
]
