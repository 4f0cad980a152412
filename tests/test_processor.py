"""
Tests for the host-facing processor: identity, configuration and lifecycle.
"""

from __future__ import annotations

import pytest

import xdr_builders as xb
from stellar_effects.config.env import TESTNET_NETWORK_PASSPHRASE
from stellar_effects.core.exceptions import ConfigurationError, ParsingError, ProcessingError
from stellar_effects.processor import EffectsProcessor, Message, ProcessingContext
from transactions import SOURCE, payment_transaction, transaction_message


def test_identity():
    p = EffectsProcessor()
    assert p.name == "flow/processor/effects"
    assert p.version == "0.1.0"
    assert p.plugin_type == "processor"
    assert "type Effect" in p.schema_definition()
    assert "effectsByOperationId" in p.query_definitions()


@pytest.mark.parametrize("config", [None, {}, {"network_passphrase": 42}])
def test_missing_network_passphrase(config):
    with pytest.raises(ConfigurationError):
        EffectsProcessor().initialize(config)


def test_invalid_configuration_values():
    with pytest.raises(ConfigurationError) as exc:
        EffectsProcessor().initialize({"network_passphrase": "   "})
    assert "network_passphrase" in exc.value.context["fields"]
    with pytest.raises(ConfigurationError):
        EffectsProcessor().initialize(
            {"network_passphrase": TESTNET_NETWORK_PASSPHRASE, "attribution_tie_break": "random"}
        )


def test_process_before_initialize():
    with pytest.raises(ConfigurationError):
        EffectsProcessor().process(ProcessingContext(), payment_transaction())


def test_register_consumer_requires_process(processor):
    with pytest.raises(ConfigurationError):
        processor.register_consumer(object())


def test_close_drops_consumers(processor, collector):
    processor.close()
    assert processor.consumers == ()
    assert processor.process(ProcessingContext(), payment_transaction()) == 2
    assert collector.messages == []


@pytest.mark.parametrize("payload", [b"not json", b"[1, 2]", b'{"ledger_sequence": 1}'])
def test_malformed_input_message(processor, payload):
    with pytest.raises(ParsingError):
        processor.process(ProcessingContext(), Message(payload=payload))


def test_derivation_failure_carries_computed_hash(processor, collector):
    """A claim whose balance never left the ledger is an internal error, tagged with the transaction."""
    tx = xb.transaction(xb.muxed_account(SOURCE), [xb.operation(15, xb.balance_id(9))])
    message = transaction_message(
        xb.envelope_v1(tx), xb.result_pair([xb.op_result(15)]), xb.meta_v2([[]])
    )
    with pytest.raises(ProcessingError) as exc:
        processor.process(ProcessingContext(), message)
    assert exc.value.transaction_hash == xb.network_hash(TESTNET_NETWORK_PASSPHRASE, 2, tx)
    assert exc.value.context["emitted"] == 0
    assert collector.messages == []


def test_context_may_be_omitted(processor, collector):
    assert processor.process(None, payment_transaction()) == 2
