"""
EffectsProcessor: host-facing processor that turns transaction messages into
effect messages for the registered consumers.

Lifecycle: initialize(config) -> register_consumer(...) -> process(...)* -> close().
Configuration problems surface from initialize; per-transaction problems from
process, always as ProcessorError.
"""

from __future__ import annotations

import threading
from typing import Any, Mapping

from stellar_effects.config.settings import ProcessorSettings
from stellar_effects.core.exceptions import ConfigurationError, ParsingError
from stellar_effects.effects_logging import get_logger
from stellar_effects.processing import pipeline
from stellar_effects.processor.context import ProcessingContext
from stellar_effects.processor.messages import Message, TransactionMessage

logger = get_logger(__name__)

PROCESSOR_NAME = "flow/processor/effects"
PROCESSOR_VERSION = "0.1.0"
PROCESSOR_TYPE = "processor"

SCHEMA_DEFINITION = """
type Effect {
    id: String!
    address: String!
    addressMuxed: String
    operationId: Int!
    details: JSON
    type: Int!
    typeString: String!
    closedAt: String!
    ledgerSequence: Int!
    index: Int!
}

scalar JSON
"""

QUERY_DEFINITIONS = """
    effectsByOperationId(operationId: Int!): [Effect]
    effectsByAddress(address: String!): [Effect]
    effectsByType(type: Int!): [Effect]
"""


class EffectsProcessor:
    name = PROCESSOR_NAME
    version = PROCESSOR_VERSION
    plugin_type = PROCESSOR_TYPE

    def __init__(self) -> None:
        self.settings: ProcessorSettings | None = None
        self._consumers: list[Any] = []
        self._lock = threading.Lock()

    def schema_definition(self) -> str:
        """GraphQL types for the effects this processor emits."""
        return SCHEMA_DEFINITION

    def query_definitions(self) -> str:
        return QUERY_DEFINITIONS

    def initialize(self, config: Mapping[str, Any] | None) -> None:
        """Validate configuration; network_passphrase is mandatory."""
        self.settings = ProcessorSettings.from_config(config)
        self._consumers = []
        logger.info(
            "effects_processor_initialized",
            network_passphrase=self.settings.network_passphrase,
            tie_break=self.settings.attribution_tie_break,
        )

    def register_consumer(self, consumer: Any) -> None:
        if not callable(getattr(consumer, "process", None)):
            raise ConfigurationError("consumer must define process(context, message)").with_context(
                "consumer", repr(consumer)
            )
        with self._lock:
            self._consumers.append(consumer)
        logger.info("effects_consumer_registered", consumer=getattr(consumer, "name", type(consumer).__name__))

    @property
    def consumers(self) -> tuple[Any, ...]:
        with self._lock:
            return tuple(self._consumers)

    def process(self, context: ProcessingContext | None, message: Message) -> int:
        """
        Process one transaction message; returns the number of effects emitted.
        Safe to call from several threads once initialized.
        """
        if self.settings is None:
            raise ConfigurationError("processor is not initialized")
        if not isinstance(message.payload, (bytes, bytearray, str)):
            raise ParsingError(
                f"expected payload bytes, got {type(message.payload).__name__}"
            ).with_context("reason", "malformed message")
        if context is not None:
            context.check("decode")
        tx_message = TransactionMessage.from_message(message)
        return pipeline.process_transaction(
            tx_message,
            self.settings,
            self.consumers,
            context=context,
            metadata=message.metadata,
        )

    def close(self) -> None:
        with self._lock:
            self._consumers = []
        logger.info("effects_processor_closed")
