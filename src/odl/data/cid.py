from __future__ import annotations

from multiformats import CID

from ..errors import CidFormatError


def parse_cid(value: str) -> CID:
    """Parse a CID from its canonical string form (v0 base58 or multibase v1)."""
    if not isinstance(value, str) or not value.strip():
        raise CidFormatError(f"Invalid content identifier: {value!r}")
    try:
        return CID.decode(value.strip())
    except Exception as exc:  # noqa: BLE001
        raise CidFormatError(f"Invalid content identifier {value!r}: {exc}") from exc


def cid_bytes(value: str) -> bytes:
    """Binary form of a CID. For CIDv0 this is the bare multihash."""
    return bytes(parse_cid(value))


def cid_to_hex(value: str) -> str:
    """Lowercase hex of the CID's binary form, two characters per byte."""
    return cid_bytes(value).hex()
