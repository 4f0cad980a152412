"""
Downstream consumers.

A consumer is anything with a name and process(context, message). Raising
from process is a delivery failure; the processor does not retry.
"""

from __future__ import annotations

import json
import threading
from typing import IO, Any, Protocol, runtime_checkable

from stellar_effects.processor.messages import Message


@runtime_checkable
class Consumer(Protocol):
    name: str

    def process(self, context: Any, message: Message) -> None: ...


class CollectingConsumer:
    """Keeps every message in memory; used by tests and the CLI."""

    name = "collecting"

    def __init__(self) -> None:
        self.messages: list[Message] = []
        self._lock = threading.Lock()

    def process(self, context: Any, message: Message) -> None:
        with self._lock:
            self.messages.append(message)

    def records(self) -> list[dict[str, Any]]:
        return [m.payload_json() for m in self.messages]


class JsonLinesConsumer:
    """Writes each effect payload as one JSON line. Safe to share between worker threads."""

    name = "jsonl"

    def __init__(self, stream: IO[str]) -> None:
        self._stream = stream
        self._lock = threading.Lock()

    def process(self, context: Any, message: Message) -> None:
        line = json.dumps(message.payload_json(), sort_keys=False)
        with self._lock:
            self._stream.write(line + "\n")
            self._stream.flush()
