"""
Pytest fixtures for the effects processor tests.

Transactions are built with tests/xdr_builders.py (see tests/transactions.py)
so decoder and pipeline tests run against real XDR payloads.
"""

from __future__ import annotations

import pytest

from stellar_effects.config.env import TESTNET_NETWORK_PASSPHRASE
from stellar_effects.processor import CollectingConsumer, EffectsProcessor


@pytest.fixture
def collector():
    return CollectingConsumer()


@pytest.fixture
def processor(collector):
    """Initialized processor on testnet with one collecting consumer."""
    p = EffectsProcessor()
    p.initialize({"network_passphrase": TESTNET_NETWORK_PASSPHRASE})
    p.register_consumer(collector)
    yield p
    p.close()


@pytest.fixture(autouse=True)
def _clean_effects_env(monkeypatch):
    """Keep host environment settings out of configuration tests."""
    for name in (
        "NETWORK_PASSPHRASE",
        "STELLAR_NETWORK",
        "EFFECTS_ATTRIBUTION_TIE_BREAK",
        "EFFECTS_WORKER_CONCURRENCY",
    ):
        monkeypatch.delenv(name, raising=False)
