"""
JSON-RPC provider for the Open Data Library chain.

Lightweight alternative to web3.py: uses httpx for HTTP. Exposes the same
``request(method, params)`` shape a wallet provider does, so a bare node
can stand in wherever a wallet is expected.
"""

from __future__ import annotations

import itertools
from typing import Any, Optional

import httpx
import structlog

from ..errors import RpcError
from ..utils import hex_to_int

logger = structlog.get_logger()

DEFAULT_TIMEOUT = 30


class JsonRpcProvider:
    """HTTP JSON-RPC endpoint.

    Args:
        url: RPC endpoint URL
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``)
    """

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._transport = transport
        self._ids = itertools.count(1)

    def __repr__(self) -> str:
        return f"JsonRpcProvider({self.url!r})"

    def request(self, method: str, params: Optional[list] = None) -> Any:
        """
        Make a JSON-RPC call.

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: If the response carries an error object
            httpx.HTTPError: On transport failures or non-2xx status
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": next(self._ids),
        }

        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            response = client.post(self.url, json=payload)
            response.raise_for_status()
            data = response.json()

        if "error" in data:
            error = data["error"] or {}
            logger.warning(
                "rpc_error",
                method=method,
                code=error.get("code"),
                error=error.get("message"),
            )
            raise RpcError(error.get("code"), str(error.get("message", "")), error.get("data"))

        return data.get("result")


def get_chain_id(provider: Any) -> int:
    """Chain id the provider is currently connected to."""
    return hex_to_int(provider.request("eth_chainId", []))


def get_block_number(provider: Any) -> int:
    return hex_to_int(provider.request("eth_blockNumber", []))


def get_nonce(provider: Any, address: str) -> int:
    return hex_to_int(provider.request("eth_getTransactionCount", [address, "pending"]))


def get_gas_price(provider: Any) -> int:
    return hex_to_int(provider.request("eth_gasPrice", []))


def estimate_gas(provider: Any, tx: dict) -> int:
    return hex_to_int(provider.request("eth_estimateGas", [tx]))


def send_raw_transaction(provider: Any, raw_tx: str) -> str:
    """Send a signed raw transaction and return its hash."""
    return provider.request("eth_sendRawTransaction", [raw_tx])


def get_transaction_receipt(provider: Any, tx_hash: str) -> Optional[dict]:
    return provider.request("eth_getTransactionReceipt", [tx_hash])
