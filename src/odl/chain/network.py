"""
Network descriptors and chain reconciliation.

Before any state-changing call the wallet must be on the network the
client was built for. Reconciliation switches the wallet over, and if the
wallet does not know that network yet, registers it first.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog

from ..errors import USER_REJECTED_CODE
from ..utils import int_to_hex
from .rpc import get_chain_id

logger = structlog.get_logger()

DEFAULT_CHAIN_ID = 3995596960668836
DEFAULT_RPC_URL = "https://testnet-rpc.adafel.com"


@dataclass(frozen=True)
class NativeCurrency:
    name: str = "Adafel Token"
    symbol: str = "ADFL"
    decimals: int = 18

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "symbol": self.symbol, "decimals": self.decimals}


@dataclass(frozen=True)
class NetworkDescriptor:
    chain_id: int = DEFAULT_CHAIN_ID
    name: str = "Adafel Testnet Network"
    native_currency: NativeCurrency = field(default_factory=NativeCurrency)
    rpc_urls: tuple[str, ...] = (DEFAULT_RPC_URL,)

    @property
    def chain_id_hex(self) -> str:
        return int_to_hex(self.chain_id)

    @property
    def rpc_url(self) -> str:
        return self.rpc_urls[0]

    def to_add_chain_params(self) -> dict[str, Any]:
        """Parameter object for ``wallet_addEthereumChain`` (EIP-3085)."""
        return {
            "chainId": self.chain_id_hex,
            "chainName": self.name,
            "nativeCurrency": self.native_currency.to_dict(),
            "rpcUrls": list(self.rpc_urls),
        }


def switch_chain(wallet: Any, network: NetworkDescriptor) -> None:
    wallet.request("wallet_switchEthereumChain", [{"chainId": network.chain_id_hex}])


def add_chain(wallet: Any, network: NetworkDescriptor) -> None:
    wallet.request("wallet_addEthereumChain", [network.to_add_chain_params()])


def ensure_network(wallet: Any, network: NetworkDescriptor) -> None:
    """
    Make sure the wallet is connected to ``network``.

    A user rejection (any error whose ``code`` is 4001) is final and is
    re-raised as is. Any other switch failure is taken to mean the wallet
    does not know the chain: it is added once and the switch retried once.
    Errors from that fallback propagate.

    Raises:
        RpcError: From the chain-id read, a rejected switch, or the fallback
    """
    current = get_chain_id(wallet)
    if current == network.chain_id:
        return

    log = logger.bind(current_chain=current, target_chain=network.chain_id)
    log.info("network_switch")
    try:
        switch_chain(wallet, network)
        return
    except Exception as exc:
        if getattr(exc, "code", None) == USER_REJECTED_CODE:
            log.info("network_switch_rejected")
            raise
        log.info("network_add", reason=str(exc))

    add_chain(wallet, network)
    switch_chain(wallet, network)
