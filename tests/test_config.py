"""
Tests for environment-driven configuration.
"""

from __future__ import annotations

import pytest

from stellar_effects.config.env import (
    DEFAULT_WORKER_CONCURRENCY,
    PUBLIC_NETWORK_PASSPHRASE,
    TESTNET_NETWORK_PASSPHRASE,
    get_network_passphrase,
    get_tie_break,
    get_worker_concurrency,
    passphrase_for_network,
)
from stellar_effects.config.settings import ProcessorSettings, settings_from_env
from stellar_effects.core.exceptions import ConfigurationError


def test_network_names():
    assert passphrase_for_network("testnet") == TESTNET_NETWORK_PASSPHRASE
    assert passphrase_for_network(" PUBNET ") == PUBLIC_NETWORK_PASSPHRASE
    assert passphrase_for_network("mainnet") == PUBLIC_NETWORK_PASSPHRASE
    assert passphrase_for_network("nowhere") is None


def test_explicit_passphrase_wins(monkeypatch):
    monkeypatch.setenv("STELLAR_NETWORK", "testnet")
    assert get_network_passphrase() == TESTNET_NETWORK_PASSPHRASE
    monkeypatch.setenv("NETWORK_PASSPHRASE", "Private Network")
    assert get_network_passphrase() == "Private Network"


def test_tie_break_from_env(monkeypatch):
    assert get_tie_break() == "earliest"
    monkeypatch.setenv("EFFECTS_ATTRIBUTION_TIE_BREAK", "LATEST")
    assert get_tie_break() == "latest"
    monkeypatch.setenv("EFFECTS_ATTRIBUTION_TIE_BREAK", "whatever")
    assert get_tie_break() == "earliest"


def test_worker_concurrency_from_env(monkeypatch):
    assert get_worker_concurrency() == DEFAULT_WORKER_CONCURRENCY
    monkeypatch.setenv("EFFECTS_WORKER_CONCURRENCY", "0")
    assert get_worker_concurrency() == 1
    monkeypatch.setenv("EFFECTS_WORKER_CONCURRENCY", "eight")
    assert get_worker_concurrency() == DEFAULT_WORKER_CONCURRENCY


def test_settings_from_env_overrides(monkeypatch):
    monkeypatch.setenv("STELLAR_NETWORK", "pubnet")
    settings = settings_from_env(attribution_tie_break="latest", worker_concurrency=None)
    assert settings.network_passphrase == PUBLIC_NETWORK_PASSPHRASE
    assert settings.attribution_tie_break == "latest"
    assert settings.worker_concurrency == DEFAULT_WORKER_CONCURRENCY


def test_settings_without_network_fail():
    with pytest.raises(ConfigurationError):
        settings_from_env()


def test_tie_break_is_normalized():
    settings = ProcessorSettings.from_config(
        {"network_passphrase": TESTNET_NETWORK_PASSPHRASE, "attribution_tie_break": " Latest "}
    )
    assert settings.attribution_tie_break == "latest"
