"""
Binary decoder: base64 XDR envelope / result / meta -> Transaction.
"""

from stellar_effects.decoder.operations import OperationKind  # noqa: F401
from stellar_effects.decoder.parser import decode_transaction  # noqa: F401

__all__ = ["OperationKind", "decode_transaction"]
