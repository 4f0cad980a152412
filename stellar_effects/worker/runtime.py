"""
Batch runtime: process independent transaction messages in parallel.

Each message is handled in isolation on a worker thread; a failing
transaction is logged and counted, never raised. Effects of one transaction
are emitted in order; across transactions the order follows completion, so
downstream consumers that need a global order re-sort by operation_id.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Iterable

from stellar_effects.config.env import DEFAULT_WORKER_CONCURRENCY
from stellar_effects.core.exceptions import ProcessorError
from stellar_effects.effects_logging import get_logger
from stellar_effects.processor.context import ProcessingContext
from stellar_effects.processor.messages import Message
from stellar_effects.processor.processor import EffectsProcessor

logger = get_logger(__name__)

MIN_CONCURRENCY = 1


@dataclass
class WorkerConfig:
    """
    concurrency: number of transactions processed in parallel.
    context: shared cancellation context; None gives each batch its own.
    """

    concurrency: int = DEFAULT_WORKER_CONCURRENCY
    context: ProcessingContext | None = None

    def __post_init__(self) -> None:
        self.concurrency = max(MIN_CONCURRENCY, int(self.concurrency))


@dataclass
class BatchSummary:
    processed: int = 0
    failed: int = 0
    effects: int = 0
    errors: list[dict[str, Any]] = field(default_factory=list)


def _process_message_safe(
    processor: EffectsProcessor,
    context: ProcessingContext,
    message: Message,
) -> tuple[int, dict[str, Any] | None]:
    """
    Process one message. Never raises; returns (effects emitted, error dict or None).
    """
    try:
        return processor.process(context, message), None
    except ProcessorError as e:
        logger.warning("effects_transaction_failed", **e.to_dict())
        return int(e.context.get("emitted", 0) or 0), e.to_dict()
    except Exception as e:
        logger.error("effects_transaction_crashed", error=str(e), exc_info=True)
        return 0, {"error": str(e), "error_type": "system"}


def run_batch(
    messages: Iterable[Message],
    processor: EffectsProcessor,
    config: WorkerConfig | None = None,
) -> BatchSummary:
    """Process all messages; returns counts of processed / failed transactions and emitted effects."""
    config = config or WorkerConfig()
    context = config.context or ProcessingContext()
    summary = BatchSummary()
    with ThreadPoolExecutor(max_workers=config.concurrency) as executor:
        futures = [executor.submit(_process_message_safe, processor, context, m) for m in messages]
        for fut in as_completed(futures):
            emitted, error = fut.result()
            summary.effects += emitted
            if error is None:
                summary.processed += 1
            else:
                summary.failed += 1
                summary.errors.append(error)
    logger.info(
        "effects_batch_complete",
        processed=summary.processed,
        failed=summary.failed,
        effects=summary.effects,
    )
    return summary
