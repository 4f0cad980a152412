"""
Processor settings.

Responsibilities:
- Validate the host-supplied configuration mapping (network_passphrase is mandatory).
- Build settings from the environment for the CLI and batch worker.
- Turn any validation failure into a ConfigurationError before a transaction is touched.
"""

from __future__ import annotations

from typing import Any, Literal, Mapping

from pydantic import BaseModel, Field, ValidationError, field_validator

from stellar_effects.config.env import (
    DEFAULT_TIE_BREAK,
    DEFAULT_WORKER_CONCURRENCY,
    get_network_passphrase,
    get_tie_break,
    get_worker_concurrency,
)
from stellar_effects.core.exceptions import ConfigurationError


class ProcessorSettings(BaseModel):
    """Validated processor configuration."""

    network_passphrase: str = Field(..., description="Stellar network passphrase; used for hashing and addresses")
    attribution_tie_break: Literal["earliest", "latest"] = Field(
        DEFAULT_TIE_BREAK,
        description="Which candidate operation claims a change in flat (ungrouped) meta",
    )
    worker_concurrency: int = Field(DEFAULT_WORKER_CONCURRENCY, ge=1, le=256)

    @field_validator("network_passphrase")
    @classmethod
    def _passphrase_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("network_passphrase must not be empty")
        return value

    @field_validator("attribution_tie_break", mode="before")
    @classmethod
    def _normalize_tie_break(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None) -> ProcessorSettings:
        """Validate a host configuration mapping; raise ConfigurationError when invalid."""
        config = dict(config or {})
        if not isinstance(config.get("network_passphrase"), str):
            raise ConfigurationError(
                "network_passphrase is required in configuration"
            ).with_context("keys", sorted(config))
        try:
            return cls.model_validate(config)
        except ValidationError as e:
            fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
            raise ConfigurationError(f"invalid processor configuration: {fields}").with_context(
                "fields", fields
            ) from e


def settings_from_env(**overrides: Any) -> ProcessorSettings:
    """Build ProcessorSettings from env; keyword overrides win when not None."""
    values: dict[str, Any] = {
        "network_passphrase": get_network_passphrase(),
        "attribution_tie_break": get_tie_break(),
        "worker_concurrency": get_worker_concurrency(),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return ProcessorSettings.from_config(values)
