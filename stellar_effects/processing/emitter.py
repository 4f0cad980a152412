"""
Emitter: effect records -> output messages -> downstream consumers.

Each record is serialized to JSON and sent to every consumer in registration
order. The first delivery failure stops emission for the transaction and is
raised as EffectsIOError; effects delivered before it stay delivered.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Mapping, Sequence

from stellar_effects.core.exceptions import EffectsIOError
from stellar_effects.effects.models import EffectRecord
from stellar_effects.effects_logging import get_logger
from stellar_effects.processor.messages import Message

logger = get_logger(__name__)

METADATA_EFFECT_ID = "effect_id"
METADATA_EFFECT_TYPE = "effect_type"


def encode_record(record: EffectRecord) -> bytes:
    return json.dumps(record.to_dict(), separators=(",", ":")).encode("utf-8")


def build_message(record: EffectRecord, metadata: Mapping[str, Any] | None = None) -> Message:
    """Input metadata is carried over; effect_id and effect_type always reflect this record."""
    out = dict(metadata or {})
    out[METADATA_EFFECT_ID] = record.id
    out[METADATA_EFFECT_TYPE] = record.type_string
    return Message(payload=encode_record(record), metadata=out)


class Emitter:
    """
    Delivers one transaction's effects. emitted counts effects accepted by every
    consumer; on failure, consumer_index says how many consumers took the
    failing effect before it stopped.
    """

    def __init__(self, consumers: Sequence[Any], context: Any = None, metadata: Mapping[str, Any] | None = None) -> None:
        self._consumers = tuple(consumers)
        self._context = context
        self._metadata = dict(metadata or {})
        self.emitted = 0

    def emit(self, record: EffectRecord) -> None:
        message = build_message(record, self._metadata)
        for position, consumer in enumerate(self._consumers):
            name = getattr(consumer, "name", type(consumer).__name__)
            try:
                consumer.process(self._context, message)
            except Exception as e:
                logger.warning(
                    "effects_consumer_failed",
                    consumer=name,
                    consumer_index=position,
                    effect_id=record.id,
                    emitted=self.emitted,
                    error=str(e),
                )
                raise EffectsIOError(f"consumer {name} failed to accept effect {record.id}: {e}").with_contract(
                    getattr(record.details, "asset_contract", None)
                ).with_context("effect_id", record.id).with_context("consumer", name).with_context(
                    "consumer_index", position
                ).with_context("emitted", self.emitted) from e
        self.emitted += 1

    def emit_all(self, records: Iterable[EffectRecord]) -> int:
        for record in records:
            self.emit(record)
        return self.emitted
