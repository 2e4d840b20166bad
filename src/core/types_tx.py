import json
from dataclasses import dataclass, asdict, fields
from typing import Any
from .crypto_layer import KeyPair, sign_struct, verify_struct, blake2b_hash
from .encoding import canonical_json


class TransactionDecodeError(ValueError):
    """Bytes that do not parse as a SignedTx."""


@dataclass
class TxBody:
    sender_pubkey_hex: str
    key: str
    value: Any

    def to_dict(self) -> dict:
        return asdict(self)

@dataclass
class SignedTx:
    """
    Signed key/value transaction.

    To the block core a transaction is opaque: it only relies on
    hash(), to_bytes() and from_bytes().
    """
    sender_pubkey_hex: str
    key: str
    value: Any
    signature: str
    pubkey: str
    context: str

    @staticmethod
    def create(body: TxBody, keypair: KeyPair) -> "SignedTx":
        payload = body.to_dict()
        signed_dict = sign_struct("TX:", keypair, payload)
        return SignedTx(**signed_dict)

    def verify(self) -> bool:
        return verify_struct("TX:", asdict(self))

    def to_bytes(self) -> bytes:
        return canonical_json(asdict(self))

    def hash(self) -> bytes:
        return blake2b_hash(self.to_bytes())

    @staticmethod
    def from_bytes(data: bytes) -> "SignedTx":
        try:
            obj = json.loads(bytes(data).decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
            raise TransactionDecodeError(f"invalid transaction encoding: {e}") from e

        if not isinstance(obj, dict):
            raise TransactionDecodeError("transaction must be a JSON object")

        expected = {f.name for f in fields(SignedTx)}
        if set(obj) != expected:
            raise TransactionDecodeError(
                f"transaction fields {sorted(obj)} != {sorted(expected)}"
            )
        for name in expected - {"value"}:
            if not isinstance(obj[name], str):
                raise TransactionDecodeError(f"field {name!r} must be a string")

        return SignedTx(**obj)
