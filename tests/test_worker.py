"""
Tests for the batch runtime.
"""

from __future__ import annotations

from stellar_effects.processor import Message, ProcessingContext
from stellar_effects.worker import WorkerConfig, run_batch
from transactions import create_account_transaction, payment_transaction


def test_run_batch_isolates_failures(processor, collector):
    messages = [
        payment_transaction(),
        Message(payload=b"{broken"),
        create_account_transaction(),
    ]
    summary = run_batch(messages, processor, WorkerConfig(concurrency=2))
    assert summary.processed == 2
    assert summary.failed == 1
    assert summary.effects == 5
    assert len(collector.messages) == 5
    (error,) = summary.errors
    assert error["error_type"] == "parsing"


def test_concurrency_floor():
    assert WorkerConfig(concurrency=0).concurrency == 1


def test_cancelled_batch_processes_nothing(processor, collector):
    context = ProcessingContext()
    context.cancel()
    summary = run_batch([payment_transaction(), payment_transaction()], processor, WorkerConfig(context=context))
    assert summary.processed == 0
    assert summary.failed == 2
    assert collector.messages == []
