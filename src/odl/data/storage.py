from __future__ import annotations

import json
import os
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Protocol

import httpx
import structlog
from multiformats import CID, multihash

from ..errors import UploadError

logger = structlog.get_logger()

PINATA_API_URL = "https://api.pinata.cloud"


class ContentStore(Protocol):
    def pin_json(self, payload: Any, name: Optional[str] = None) -> str:
        """Store ``payload`` as JSON and return its content identifier."""
        ...


def _json_bytes(payload: Any) -> bytes:
    return json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")


def local_cid(data: bytes) -> str:
    """CIDv1 (json codec, sha2-256, base32) of ``data``."""
    digest = multihash.digest(data, "sha2-256")
    return str(CID("base32", 1, "json", digest))


@dataclass(frozen=True)
class LocalDirStore:
    """Content store on the local filesystem, keyed by a computed CID."""

    root: Path

    def pin_json(self, payload: Any, name: Optional[str] = None) -> str:
        data = _json_bytes(payload)
        cid = local_cid(data)
        self.root.mkdir(parents=True, exist_ok=True)
        self._atomic_write(self.root / f"{cid}.json", data)
        logger.info("content_pinned", store="local", cid=cid, name=name, size=len(data))
        return cid

    def get_json(self, cid: str) -> Any:
        path = (self.root / f"{cid}.json").resolve()
        if not path.is_relative_to(self.root.resolve()):
            raise ValueError(f"Path traversal detected: {cid}")
        return json.loads(path.read_bytes())

    def _atomic_write(self, path: Path, data: bytes) -> None:
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            with tmp.open("wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            tmp.replace(path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise


@dataclass
class PinataStore:
    """
    Pinata pinning service (IPFS).

    Attributes:
        api_key: Pinata API key
        secret_api_key: Pinata secret API key
        base_url: API root, overridable for gateways and tests
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``)
    """

    api_key: str
    secret_api_key: str
    base_url: str = PINATA_API_URL
    timeout: float = 60
    transport: Optional[httpx.BaseTransport] = field(default=None, repr=False)

    def _headers(self) -> dict[str, str]:
        return {
            "pinata_api_key": self.api_key,
            "pinata_secret_api_key": self.secret_api_key,
        }

    def pin_json(self, payload: Any, name: Optional[str] = None) -> str:
        """Pin ``payload`` via pinJSONToIPFS. ``name`` defaults to a fresh UUID4."""
        if not self.api_key or not self.secret_api_key:
            raise UploadError("Pinata API key and secret are required for uploads")

        body = {
            "pinataContent": payload,
            "pinataMetadata": {"name": name or str(uuid.uuid4())},
        }
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            resp = client.post(
                f"{self.base_url}/pinning/pinJSONToIPFS",
                json=body,
                headers=self._headers(),
            )

        if resp.status_code != 200:
            raise UploadError(f"Pinata error: {resp.status_code} - {resp.text}")

        cid = resp.json().get("IpfsHash")
        if not cid:
            raise UploadError(f"Pinata response has no IpfsHash: {resp.text}")
        logger.info("content_pinned", store="pinata", cid=cid, name=body["pinataMetadata"]["name"])
        return cid
