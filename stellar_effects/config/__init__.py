"""
Configuration for the effects processor.

Loads settings from environment variables (.env supported) or from a host
configuration mapping, and validates them before any transaction is processed.
"""

from stellar_effects.config.settings import ProcessorSettings, settings_from_env  # noqa: F401

__all__ = ["ProcessorSettings", "settings_from_env"]
