"""
Canonical byte encodings shared by transactions and blocks.

- canonical_json: deterministic JSON bytes for signed payloads.
- int_to_bytes / int_from_bytes: minimal big-endian unsigned integers.
- encode_sequence / decode_sequence: length-prefixed list of byte strings.
"""

import json
from typing import Any, List, Sequence

# Width of the big-endian length prefix written before each sequence element
LENGTH_PREFIX_SIZE = 8


class SequenceDecodeError(ValueError):
    """Raised when a byte string is not a well-formed encoded sequence."""


def canonical_json(obj: Any) -> bytes:
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


def int_to_bytes(value: int) -> bytes:
    """Zero encodes as b"" so that no encoding ever carries a leading zero byte."""
    if value < 0:
        raise ValueError(f"cannot encode negative integer {value}")
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


def int_from_bytes(data: bytes, canonical: bool = False) -> int:
    """
    Big-endian unsigned decode. With canonical=True only the output of
    int_to_bytes is accepted: a leading zero byte (including b"\\x00" for
    zero) raises ValueError.
    """
    if canonical and data[:1] == b"\x00":
        raise ValueError(f"integer {bytes(data).hex()} has a leading zero byte")
    return int.from_bytes(data, "big")


def encode_sequence(items: Sequence[bytes]) -> bytes:
    out = bytearray()
    for item in items:
        out += len(item).to_bytes(LENGTH_PREFIX_SIZE, "big")
        out += item
    return bytes(out)


def decode_sequence(data: bytes) -> List[bytes]:
    items: List[bytes] = []
    offset = 0
    total = len(data)
    while offset < total:
        if offset + LENGTH_PREFIX_SIZE > total:
            raise SequenceDecodeError(
                f"truncated length prefix at offset {offset}"
            )
        size = int.from_bytes(data[offset:offset + LENGTH_PREFIX_SIZE], "big")
        offset += LENGTH_PREFIX_SIZE
        if offset + size > total:
            raise SequenceDecodeError(
                f"element at offset {offset} needs {size} bytes, {total - offset} left"
            )
        items.append(bytes(data[offset:offset + size]))
        offset += size
    return items
