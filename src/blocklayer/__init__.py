"""
Blocklayer module - Block, canonical encoding and decode errors
"""

from .block import Block, BLOCK_ARITY, FIELD_ORDER
from .errors import (
    BlockErrorKind,
    BlockDecodeError,
    ArityError,
    FieldLengthError,
    IntegerEncodingError,
    TransactionsError,
    VerificationError,
)

__all__ = [
    "Block",
    "BLOCK_ARITY",
    "FIELD_ORDER",
    "BlockErrorKind",
    "BlockDecodeError",
    "ArityError",
    "FieldLengthError",
    "IntegerEncodingError",
    "TransactionsError",
    "VerificationError",
]
