"""
Environment variable loading for the effects processor.

- NETWORK_PASSPHRASE: explicit network passphrase (wins over STELLAR_NETWORK)
- STELLAR_NETWORK: pubnet | testnet | futurenet (default: none, passphrase required)
- EFFECTS_ATTRIBUTION_TIE_BREAK: earliest | latest (default: earliest)
- EFFECTS_WORKER_CONCURRENCY: parallel transactions in batch mode (default: 4)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is stellar_effects/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

PUBLIC_NETWORK_PASSPHRASE = "Public Global Stellar Network ; September 2015"
TESTNET_NETWORK_PASSPHRASE = "Test SDF Network ; September 2015"
FUTURENET_NETWORK_PASSPHRASE = "Test SDF Future Network ; October 2022"

NETWORK_PASSPHRASES = {
    "pubnet": PUBLIC_NETWORK_PASSPHRASE,
    "public": PUBLIC_NETWORK_PASSPHRASE,
    "mainnet": PUBLIC_NETWORK_PASSPHRASE,
    "testnet": TESTNET_NETWORK_PASSPHRASE,
    "futurenet": FUTURENET_NETWORK_PASSPHRASE,
}

DEFAULT_TIE_BREAK = "earliest"
DEFAULT_WORKER_CONCURRENCY = 4


def load_effects_env() -> None:
    """Load .env from project root. Safe to call multiple times; existing env wins."""
    load_dotenv(_ENV_PATH, override=False)


def passphrase_for_network(network: str) -> str | None:
    """Map a network name (pubnet, testnet, futurenet) to its passphrase."""
    return NETWORK_PASSPHRASES.get((network or "").strip().lower())


def get_network_passphrase() -> str | None:
    """
    Resolve the network passphrase from env.
    Order: NETWORK_PASSPHRASE > STELLAR_NETWORK > None.
    """
    load_effects_env()
    explicit = (os.getenv("NETWORK_PASSPHRASE") or "").strip()
    if explicit:
        return explicit
    return passphrase_for_network(os.getenv("STELLAR_NETWORK") or "")


def get_tie_break() -> str:
    """Return EFFECTS_ATTRIBUTION_TIE_BREAK: earliest | latest. Default: earliest."""
    load_effects_env()
    raw = (os.getenv("EFFECTS_ATTRIBUTION_TIE_BREAK") or DEFAULT_TIE_BREAK).strip().lower()
    return raw if raw in ("earliest", "latest") else DEFAULT_TIE_BREAK


def get_worker_concurrency() -> int:
    """Return EFFECTS_WORKER_CONCURRENCY as a positive int."""
    load_effects_env()
    raw = (os.getenv("EFFECTS_WORKER_CONCURRENCY") or "").strip()
    try:
        return max(1, int(raw)) if raw else DEFAULT_WORKER_CONCURRENCY
    except ValueError:
        return DEFAULT_WORKER_CONCURRENCY
