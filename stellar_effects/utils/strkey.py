"""
Stellar strkey encoding: base32(version byte + payload + CRC16-XModem, little-endian).

Only encoding is needed here; payloads come straight out of decoded XDR.
"""

from __future__ import annotations

import base64
import binascii
import struct

VERSION_ACCOUNT_ID = 6 << 3  # G
VERSION_MUXED_ACCOUNT = 12 << 3  # M
VERSION_PRE_AUTH_TX = 19 << 3  # T
VERSION_SHA256_HASH = 23 << 3  # X
VERSION_SIGNED_PAYLOAD = 15 << 3  # P
VERSION_CONTRACT = 2 << 3  # C
VERSION_LIQUIDITY_POOL = 11 << 3  # L
VERSION_CLAIMABLE_BALANCE = 1 << 3  # B


def _checksum(data: bytes) -> bytes:
    return struct.pack("<H", binascii.crc_hqx(data, 0))


def encode_check(version: int, payload: bytes) -> str:
    """Encode payload under the given version byte."""
    body = bytes([version]) + bytes(payload)
    return base64.b32encode(body + _checksum(body)).decode("ascii").rstrip("=")


def encode_account_id(ed25519: bytes) -> str:
    if len(ed25519) != 32:
        raise ValueError(f"ed25519 key must be 32 bytes, got {len(ed25519)}")
    return encode_check(VERSION_ACCOUNT_ID, ed25519)


def encode_muxed_account(ed25519: bytes, muxed_id: int) -> str:
    """M-address: 32-byte key followed by the 8-byte big-endian id."""
    if len(ed25519) != 32:
        raise ValueError(f"ed25519 key must be 32 bytes, got {len(ed25519)}")
    return encode_check(VERSION_MUXED_ACCOUNT, ed25519 + struct.pack(">Q", muxed_id))


def encode_pre_auth_tx(tx_hash: bytes) -> str:
    return encode_check(VERSION_PRE_AUTH_TX, tx_hash)


def encode_sha256_hash(digest: bytes) -> str:
    return encode_check(VERSION_SHA256_HASH, digest)


def encode_signed_payload(ed25519: bytes, payload: bytes) -> str:
    """P-address: key, uint32 payload length, payload zero-padded to 4 bytes."""
    padding = (4 - len(payload) % 4) % 4
    body = ed25519 + struct.pack(">I", len(payload)) + payload + b"\x00" * padding
    return encode_check(VERSION_SIGNED_PAYLOAD, body)


def encode_contract(contract_id: bytes) -> str:
    return encode_check(VERSION_CONTRACT, contract_id)


def encode_liquidity_pool(pool_id: bytes) -> str:
    return encode_check(VERSION_LIQUIDITY_POOL, pool_id)


def encode_claimable_balance(balance_id: bytes, id_type: int = 0) -> str:
    return encode_check(VERSION_CLAIMABLE_BALANCE, bytes([id_type]) + balance_id)
