import binascii
from typing import Sequence

from nacl.signing import SigningKey, VerifyKey
from nacl.hash import blake2b
from nacl.encoding import RawEncoder
from nacl.exceptions import BadSignatureError, CryptoError

from .encoding import canonical_json

# Could be modified
CHAIN_ID = "block-core"

DIGEST_SIZE = 32
PUBLIC_KEY_SIZE = 32
SIGNATURE_SIZE = 64

ZERO_DIGEST = bytes(DIGEST_SIZE)

_LEAF_PREFIX = b"\x00"
_NODE_PREFIX = b"\x01"


def blake2b_hash(data: bytes) -> bytes:
    return blake2b(data, digest_size=DIGEST_SIZE, encoder=RawEncoder)


def merkle_root(items: Sequence[bytes]) -> bytes:
    """
    Order-sensitive Merkle root over raw byte strings.

    - Empty list -> 32 zero bytes
    - Leaf = H(0x00 || item), node = H(0x01 || left || right)
    - An unpaired node at the end of a level moves up unchanged
    """
    if not items:
        return ZERO_DIGEST

    level = [blake2b_hash(_LEAF_PREFIX + bytes(item)) for item in items]
    while len(level) > 1:
        next_level = []
        for i in range(0, len(level) - 1, 2):
            next_level.append(blake2b_hash(_NODE_PREFIX + level[i] + level[i + 1]))
        if len(level) % 2 == 1:
            next_level.append(level[-1])
        level = next_level
    return level[0]


class KeyPair:
    def __init__(self, seed: bytes | None = None):
        if seed:
            self.sk = SigningKey(seed[:32])
        else:
            self.sk = SigningKey.generate()
        self.vk = self.sk.verify_key
        self.pubkey_bytes = self.vk.encode()
        self.pubkey_hex = binascii.hexlify(self.pubkey_bytes).decode()

    def pubkey(self) -> str:
        return self.pubkey_hex


def sign_digest(keypair: KeyPair, message: bytes) -> bytes:
    """Detached Ed25519 signature over a 32-byte digest."""
    if len(message) != DIGEST_SIZE:
        raise ValueError(f"message must be {DIGEST_SIZE} bytes, got {len(message)}")
    return keypair.sk.sign(message, encoder=RawEncoder).signature


def verify_digest(message: bytes, public_key: bytes, signature: bytes) -> bool:
    if (
        len(message) != DIGEST_SIZE
        or len(public_key) != PUBLIC_KEY_SIZE
        or len(signature) != SIGNATURE_SIZE
    ):
        return False
    try:
        VerifyKey(bytes(public_key)).verify(bytes(message), bytes(signature))
        return True
    except (BadSignatureError, CryptoError, ValueError):
        # an all-zero or off-curve key is rejected by libsodium, not a crash
        return False


def _domain_context(ctx: str) -> str:
    return f"{ctx}{CHAIN_ID}"


def sign_struct(ctx: str, keypair: KeyPair, payload: dict) -> dict:
    # ctx must be: "TX:" (blocks sign their body hash with sign_digest)
    context_str = _domain_context(ctx)
    to_sign = {"context": context_str, "payload": payload}
    msg_bytes = canonical_json(to_sign)
    signature = keypair.sk.sign(msg_bytes, encoder=RawEncoder).signature

    signed = payload.copy()
    signed.update({
        "signature": binascii.hexlify(signature).decode(),
        "pubkey": keypair.pubkey(),
        "context": context_str
    })
    return signed


def verify_struct(ctx: str, signed_obj: dict) -> bool:
    expected_ctx = _domain_context(ctx)
    if signed_obj.get("context") != expected_ctx:
        return False

    try:
        sig_hex = signed_obj["signature"]
        pub_hex = signed_obj["pubkey"]
        payload = {k: v for k, v in signed_obj.items()
                  if k not in ("signature", "pubkey", "context")}

        to_verify = {"context": expected_ctx, "payload": payload}
        msg_bytes = canonical_json(to_verify)
        sig_bytes = binascii.unhexlify(sig_hex)
        pub_bytes = binascii.unhexlify(pub_hex)

        VerifyKey(pub_bytes).verify(msg_bytes, sig_bytes, encoder=RawEncoder)
        return True
    except (KeyError, TypeError, ValueError, binascii.Error, CryptoError):
        return False
