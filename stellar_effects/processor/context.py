"""Per-call processing context carrying the caller's cancellation signal."""

from __future__ import annotations

import threading
from typing import Any

from stellar_effects.core.exceptions import ProcessingCancelled


class ProcessingContext:
    """
    Cancellation is cooperative: the pipeline checks it before decoding and
    before each operation, never in the middle of one.
    """

    def __init__(self, cancel_event: threading.Event | None = None, **values: Any) -> None:
        self._cancel_event = cancel_event or threading.Event()
        self.values = dict(values)

    def cancel(self) -> None:
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def check(self, stage: str) -> None:
        if self.cancelled:
            raise ProcessingCancelled(f"processing cancelled before {stage}").with_context("stage", stage)
