"""
Errors raised by Block.from_bytes.

Every decode failure is a BlockDecodeError tagged with a BlockErrorKind,
so callers can branch on `err.kind` instead of parsing messages.
"""

from enum import Enum


class BlockErrorKind(Enum):
    MALFORMED = "malformed"
    ARITY = "arity"
    ACCOUNTS_HASH = "accounts_hash"
    PREVIOUS_BLOCK_HASH = "previous_block_hash"
    RECEIPTS_HASH = "receipts_hash"
    SIGNATURE = "signature"
    VALIDATOR = "validator"
    INTEGER = "integer"
    TRANSACTIONS = "transactions"
    VERIFICATION = "verification"


class BlockDecodeError(Exception):
    def __init__(self, kind: BlockErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


class ArityError(BlockDecodeError):
    def __init__(self, expected: int, actual: int):
        super().__init__(
            BlockErrorKind.ARITY,
            f"block has {actual} fields, expected {expected}",
        )
        self.expected = expected
        self.actual = actual


class FieldLengthError(BlockDecodeError):
    def __init__(self, kind: BlockErrorKind, expected: int, actual: int):
        super().__init__(
            kind,
            f"{kind.value} must be {expected} bytes, got {actual}",
        )
        self.expected = expected
        self.actual = actual


class IntegerEncodingError(BlockDecodeError):
    """Integer field not in minimal big-endian form."""

    def __init__(self, field_name: str, message: str):
        super().__init__(BlockErrorKind.INTEGER, f"{field_name}: {message}")
        self.field_name = field_name


class TransactionsError(BlockDecodeError):
    def __init__(self, message: str, index: int | None = None):
        super().__init__(BlockErrorKind.TRANSACTIONS, message)
        self.index = index


class VerificationError(BlockDecodeError):
    def __init__(self, message: str = "block signature does not verify"):
        super().__init__(BlockErrorKind.VERIFICATION, message)
