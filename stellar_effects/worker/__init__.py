"""
Batch worker: runs independent transactions through the processor on a
thread pool with per-transaction failure isolation.
"""

from stellar_effects.worker.runtime import BatchSummary, WorkerConfig, run_batch

__all__ = ["BatchSummary", "WorkerConfig", "run_batch"]
