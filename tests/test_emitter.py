"""
Tests for effect serialization and delivery to consumers.
"""

from __future__ import annotations

import pytest

from stellar_effects.core.exceptions import EffectsIOError, ProcessorError
from stellar_effects.effects import EffectType
from stellar_effects.effects.details import ContractBalanceDetails
from stellar_effects.effects.models import EffectRecord
from stellar_effects.processing.emitter import Emitter
from stellar_effects.processor import CollectingConsumer, ProcessingContext
from stellar_effects.utils import strkey
from transactions import CLOSE_TIME, LEDGER, payment_transaction

ASSET_CONTRACT = strkey.encode_contract(b"\x09" * 32)
HOLDER = strkey.encode_contract(b"\x0a" * 32)


class FailingConsumer:
    name = "failing"

    def __init__(self, fail_after: int = 0) -> None:
        self.fail_after = fail_after
        self.seen = 0

    def process(self, context, message) -> None:
        if self.seen >= self.fail_after:
            raise OSError("downstream unavailable")
        self.seen += 1


def test_consumer_failure_stops_emission(processor, collector):
    """The effect that failed and everything after it are not counted as emitted."""
    failing = FailingConsumer(fail_after=1)
    processor.register_consumer(failing)
    with pytest.raises(EffectsIOError) as exc:
        processor.process(ProcessingContext(), payment_transaction(op_count=2))
    err = exc.value
    assert err.context["consumer"] == "failing"
    assert err.context["emitted"] == 1
    assert err.ledger_sequence > 0
    assert isinstance(err.__cause__, OSError)
    # the collector, registered first, saw the first effect and the one that failed downstream
    assert len(collector.messages) == 2


def test_io_error_is_a_processor_error(processor):
    processor.register_consumer(FailingConsumer())
    with pytest.raises(ProcessorError) as exc:
        processor.process(ProcessingContext(), payment_transaction())
    assert exc.value.to_dict()["error_type"] == "io"


def test_payload_is_compact_json(processor, collector):
    processor.process(ProcessingContext(), payment_transaction())
    payload = collector.messages[0].payload
    assert isinstance(payload, bytes)
    assert b", " not in payload and b": " not in payload


def _contract_credit() -> EffectRecord:
    return EffectRecord(
        address=HOLDER,
        operation_id=5299989647361,
        details=ContractBalanceDetails(HOLDER, ASSET_CONTRACT, 3_0000000),
        effect_type=EffectType.CONTRACT_CREDITED,
        closed_at=CLOSE_TIME,
        ledger_sequence=LEDGER,
        index=0,
        id="5299989647361-0",
    )


def test_partial_delivery_names_failing_consumer():
    """emitted counts full deliveries; consumer_index tells how far the failing effect got."""
    first = CollectingConsumer()
    emitter = Emitter([first, FailingConsumer()])
    with pytest.raises(EffectsIOError) as exc:
        emitter.emit(_contract_credit())
    assert exc.value.context["emitted"] == 0
    assert exc.value.context["consumer_index"] == 1
    assert len(first.messages) == 1


def test_contract_effect_failure_carries_contract_id():
    emitter = Emitter([FailingConsumer()])
    with pytest.raises(EffectsIOError) as exc:
        emitter.emit(_contract_credit())
    assert exc.value.contract_id == ASSET_CONTRACT
    assert exc.value.to_dict()["contract_id"] == ASSET_CONTRACT
