"""
Argument encoding for contract calls.

Schema column names, user names and analytics values travel as bytes32:
UTF-8 bytes, right-padded with zeros to 32 bytes.
"""

from __future__ import annotations

from typing import Iterable

from ..errors import EncodingError
from ..utils import strip_0x

BYTES32_SIZE = 32


def to_bytes32(value: object) -> bytes:
    raw = str(value).encode("utf-8")
    if len(raw) > BYTES32_SIZE:
        raise EncodingError(
            f"Value {value!r} is {len(raw)} bytes; at most {BYTES32_SIZE} fit in bytes32"
        )
    return raw.ljust(BYTES32_SIZE, b"\x00")


def encode_strings(values: Iterable[object]) -> list[bytes]:
    return [to_bytes32(v) for v in values]


def from_bytes32(value: bytes | str) -> str:
    if isinstance(value, str):
        value = bytes.fromhex(strip_0x(value))
    return value.rstrip(b"\x00").decode("utf-8", errors="replace")
