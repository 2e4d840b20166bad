"""
Module Block - the ledger block, its canonical encoding, hashes and validity
"""

from dataclasses import dataclass, replace
from typing import Tuple, Type

from core.types_tx import SignedTx
from core.crypto_layer import (
    KeyPair,
    merkle_root,
    sign_digest,
    verify_digest,
    DIGEST_SIZE,
    PUBLIC_KEY_SIZE,
    SIGNATURE_SIZE,
)
from core.encoding import (
    encode_sequence,
    decode_sequence,
    int_to_bytes,
    int_from_bytes,
    SequenceDecodeError,
)
from .errors import (
    BlockErrorKind,
    BlockDecodeError,
    ArityError,
    FieldLengthError,
    IntegerEncodingError,
    TransactionsError,
    VerificationError,
)

# Wire layout: position i of the encoded sequence holds FIELD_ORDER[i].
# Reordering is a breaking format change.
FIELD_ORDER = (
    "accounts_hash",
    "chain",
    "number",
    "previous_block_hash",
    "receipts_hash",
    "signature",
    "solar_price",
    "solar_used",
    "time",
    "transactions",
    "validator",
)
BLOCK_ARITY = len(FIELD_ORDER)

_FIXED_FIELDS = {
    "accounts_hash": (DIGEST_SIZE, BlockErrorKind.ACCOUNTS_HASH),
    "previous_block_hash": (DIGEST_SIZE, BlockErrorKind.PREVIOUS_BLOCK_HASH),
    "receipts_hash": (DIGEST_SIZE, BlockErrorKind.RECEIPTS_HASH),
    "signature": (SIGNATURE_SIZE, BlockErrorKind.SIGNATURE),
    "validator": (PUBLIC_KEY_SIZE, BlockErrorKind.VALIDATOR),
}
_INT_FIELDS = ("chain", "number", "solar_price", "solar_used", "time")


@dataclass(frozen=True)
class Block:
    """Block: header fields, validator signature and ordered transactions"""
    accounts_hash: bytes = bytes(DIGEST_SIZE)
    chain: int = 0
    number: int = 0
    previous_block_hash: bytes = bytes(DIGEST_SIZE)
    receipts_hash: bytes = bytes(DIGEST_SIZE)
    signature: bytes = bytes(SIGNATURE_SIZE)
    solar_price: int = 0
    solar_used: int = 0
    time: int = 0
    transactions: Tuple[SignedTx, ...] = ()
    validator: bytes = bytes(PUBLIC_KEY_SIZE)

    def __post_init__(self):
        for name, (size, _) in _FIXED_FIELDS.items():
            value = bytes(getattr(self, name))
            if len(value) != size:
                raise ValueError(f"{name} must be {size} bytes, got {len(value)}")
            object.__setattr__(self, name, value)
        for name in _INT_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
        object.__setattr__(self, "transactions", tuple(self.transactions))

    @classmethod
    def new(cls) -> "Block":
        """Zero-valued block, a starting point for a producer, not a valid block"""
        return cls()

    def body_hash(self) -> bytes:
        """Header digest signed by the validator (no signature, no transactions)"""
        return merkle_root([
            self.accounts_hash,
            int_to_bytes(self.chain),
            int_to_bytes(self.number),
            self.previous_block_hash,
            self.receipts_hash,
            int_to_bytes(self.solar_price),
            int_to_bytes(self.solar_used),
            int_to_bytes(self.time),
            self.validator,
        ])

    def hash(self) -> bytes:
        """Block identity: body hash bound to the signature"""
        return merkle_root([self.body_hash(), self.signature])

    def transactions_hash(self) -> bytes:
        return merkle_root([tx.hash() for tx in self.transactions])

    def verify(self) -> bool:
        """
        Genesis (number == 0) is trusted out-of-band and always passes.
        Any other block must carry the validator's signature over body_hash().
        Chain linkage and transaction validity are not checked here.
        """
        if self.number == 0:
            return True
        return verify_digest(self.body_hash(), self.validator, self.signature)

    def sign(self, keypair: KeyPair) -> "Block":
        """Copy of this block with validator set to keypair and a fresh signature"""
        unsigned = replace(self, validator=keypair.pubkey_bytes)
        return replace(unsigned, signature=sign_digest(keypair, unsigned.body_hash()))

    def to_bytes(self) -> bytes:
        return encode_sequence([
            self.accounts_hash,
            int_to_bytes(self.chain),
            int_to_bytes(self.number),
            self.previous_block_hash,
            self.receipts_hash,
            self.signature,
            int_to_bytes(self.solar_price),
            int_to_bytes(self.solar_used),
            int_to_bytes(self.time),
            encode_sequence([tx.to_bytes() for tx in self.transactions]),
            self.validator,
        ])

    @classmethod
    def from_bytes(cls, data: bytes, tx_type: Type = SignedTx) -> "Block":
        """
        Decode a block and check it with verify().

        Raises a BlockDecodeError subclass on any failure; a block is
        either returned whole or not at all.
        """
        try:
            items = decode_sequence(data)
        except SequenceDecodeError as e:
            raise BlockDecodeError(BlockErrorKind.MALFORMED, str(e)) from e

        if len(items) != BLOCK_ARITY:
            raise ArityError(BLOCK_ARITY, len(items))

        values = dict(zip(FIELD_ORDER, items))

        for name, (size, kind) in _FIXED_FIELDS.items():
            if len(values[name]) != size:
                raise FieldLengthError(kind, size, len(values[name]))

        for name in _INT_FIELDS:
            try:
                values[name] = int_from_bytes(values[name], canonical=True)
            except ValueError as e:
                raise IntegerEncodingError(name, str(e)) from e

        values["transactions"] = _decode_transactions(values["transactions"], tx_type)

        block = cls(**values)
        if not block.verify():
            raise VerificationError()
        return block


def _decode_transactions(blob: bytes, tx_type: Type) -> tuple:
    try:
        encoded = decode_sequence(blob)
    except SequenceDecodeError as e:
        raise TransactionsError(f"transaction list is malformed: {e}") from e

    txs = []
    for index, tx_bytes in enumerate(encoded):
        try:
            txs.append(tx_type.from_bytes(tx_bytes))
        except ValueError as e:
            raise TransactionsError(f"transaction {index} does not parse: {e}", index) from e
    return tuple(txs)
