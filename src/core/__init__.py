from .encoding import (
    canonical_json,
    int_to_bytes,
    int_from_bytes,
    encode_sequence,
    decode_sequence,
    SequenceDecodeError,
)
from .crypto_layer import (
    KeyPair,
    sign_struct,
    verify_struct,
    sign_digest,
    verify_digest,
    merkle_root,
    blake2b_hash as hash,
)
from .types_tx import TxBody, SignedTx, TransactionDecodeError
from .logging_utils import JsonLinesLogger

__all__ = [
    "canonical_json",
    "int_to_bytes",
    "int_from_bytes",
    "encode_sequence",
    "decode_sequence",
    "SequenceDecodeError",
    "KeyPair",
    "sign_struct",
    "verify_struct",
    "sign_digest",
    "verify_digest",
    "merkle_root",
    "hash",
    "TxBody",
    "SignedTx",
    "TransactionDecodeError",
    "JsonLinesLogger",
]
