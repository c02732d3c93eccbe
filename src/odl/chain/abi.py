"""
ABI Loader - Loads contract ABIs shipped with the package.

Artifacts live in odl/chain/artifacts/<ContractName>.json and carry the
ABI under the "abi" key, the same shape compiler output uses.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

ARTIFACTS_DIR = Path(__file__).resolve().parent / "artifacts"

OPEN_DATA_LIBRARY = "OpenDataLibrary"


@lru_cache(maxsize=16)
def load_abi(contract_name: str) -> list[dict[str, Any]]:
    """
    Load ABI for a contract from the packaged artifacts.

    Raises:
        FileNotFoundError: If the artifact is missing
    """
    abi_path = ARTIFACTS_DIR / f"{contract_name}.json"
    if not abi_path.exists():
        raise FileNotFoundError(f"ABI not found: {abi_path}")

    with abi_path.open("r", encoding="utf-8") as f:
        artifact = json.load(f)

    return artifact["abi"]


def find_function(abi: list[dict[str, Any]], function_name: str) -> dict[str, Any]:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise ValueError(f"Function {function_name} not found in ABI")


def input_types(entry: dict[str, Any]) -> list[str]:
    return [inp["type"] for inp in entry.get("inputs", [])]


def output_types(entry: dict[str, Any]) -> list[str]:
    return [out["type"] for out in entry.get("outputs", [])]


def is_read_only(entry: dict[str, Any]) -> bool:
    return entry.get("stateMutability") in ("view", "pure")


def open_data_library_abi(path: Optional[Path] = None) -> list[dict[str, Any]]:
    """Load the Open Data Library ABI, or a replacement artifact at ``path``."""
    if path is None:
        return load_abi(OPEN_DATA_LIBRARY)
    with path.open("r", encoding="utf-8") as f:
        artifact = json.load(f)
    return artifact["abi"] if isinstance(artifact, dict) else artifact
