"""
Host adapter: input messages, processing context, consumers and the
EffectsProcessor that ties them to the pipeline.
"""

from stellar_effects.processor.consumers import CollectingConsumer, Consumer, JsonLinesConsumer
from stellar_effects.processor.context import ProcessingContext
from stellar_effects.processor.messages import Message, TransactionMessage
from stellar_effects.processor.processor import EffectsProcessor

__all__ = [
    "CollectingConsumer",
    "Consumer",
    "EffectsProcessor",
    "JsonLinesConsumer",
    "Message",
    "ProcessingContext",
    "TransactionMessage",
]
