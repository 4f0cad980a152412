"""
Host messages.

Message is what flows between the host and processors: opaque payload bytes
plus a metadata mapping. TransactionMessage validates the JSON map carried by
an input message before any decoding starts.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError, field_validator

from stellar_effects.core.exceptions import ParsingError

UINT32_MAX = 2**32 - 1


@dataclass
class Message:
    payload: bytes
    metadata: dict[str, Any] = field(default_factory=dict)

    def payload_json(self) -> Any:
        return json.loads(self.payload)


class TransactionMessage(BaseModel):
    """One transaction as published by the ledger source."""

    envelope_xdr: str = Field(..., min_length=1)
    result_xdr: str = Field(..., min_length=1)
    meta_xdr: str = Field(..., min_length=1)
    ledger_sequence: int = Field(..., ge=0, le=UINT32_MAX)
    ledger_close_time: datetime
    hash: str | None = None
    transaction_index: int = Field(1, ge=0)

    @field_validator("envelope_xdr", "result_xdr", "meta_xdr", mode="before")
    @classmethod
    def _strip_payload(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TransactionMessage:
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
            tx_hash = data.get("hash")
            ledger = data.get("ledger_sequence")
            raise ParsingError(f"invalid transaction message: {fields}").with_transaction(
                tx_hash if isinstance(tx_hash, str) else None
            ).with_ledger(
                ledger if isinstance(ledger, int) and not isinstance(ledger, bool) and ledger >= 0 else None
            ).with_context("fields", fields) from e

    @classmethod
    def from_message(cls, message: Message) -> TransactionMessage:
        """Parse and validate the JSON map in message.payload."""
        try:
            data = json.loads(message.payload)
        except (TypeError, ValueError) as e:
            raise ParsingError(f"transaction message is not valid JSON: {e}").with_context(
                "reason", "malformed message"
            ) from e
        if not isinstance(data, dict):
            raise ParsingError("transaction message must be a JSON object").with_context(
                "reason", "malformed message"
            )
        return cls.from_mapping(data)
