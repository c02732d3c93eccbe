from __future__ import annotations

from typing import Any

BOM = "\ufeff"


def ensure_0x(value: str) -> str:
    return value if value.startswith("0x") else f"0x{value}"


def strip_0x(value: str) -> str:
    return value[2:] if value.startswith("0x") else value


def hex_to_int(value: str | int | None) -> int:
    if value is None:
        raise ValueError("Expected a hex quantity, got None")
    if isinstance(value, int):
        return value
    return int(value, 16)


def int_to_hex(value: int) -> str:
    if value < 0:
        raise ValueError(f"Quantity must be non-negative: {value}")
    return hex(value)


def strip_bom(text: str | bytes) -> str:
    if isinstance(text, (bytes, bytearray)):
        return bytes(text).decode("utf-8-sig")
    if text.startswith(BOM):
        return text[len(BOM):]
    return text


def listify(value: Any) -> Any:
    """Turn the nested tuples eth-abi decodes into lists."""
    if isinstance(value, (list, tuple)):
        return [listify(item) for item in value]
    return value
