"""
Core cross-cutting pieces: the processor error hierarchy.
"""

from stellar_effects.core.exceptions import (  # noqa: F401
    ConfigurationError,
    EffectsIOError,
    ErrorSeverity,
    ErrorType,
    ParsingError,
    ProcessingCancelled,
    ProcessingError,
    ProcessorError,
)

__all__ = [
    "ConfigurationError",
    "EffectsIOError",
    "ErrorSeverity",
    "ErrorType",
    "ParsingError",
    "ProcessingCancelled",
    "ProcessingError",
    "ProcessorError",
]
