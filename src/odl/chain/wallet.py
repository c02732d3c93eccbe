"""
Wallet providers and transport selection.

A wallet is anything with an EIP-1193 style ``request(method, params)``
method: a browser bridge, a signer service, or a plain node. Which of the
three ways a client talks to the chain is decided once, at construction.
"""

from __future__ import annotations

import enum
from typing import Any, Optional, Protocol, runtime_checkable

from eth_account.signers.local import LocalAccount


@runtime_checkable
class WalletProvider(Protocol):
    def request(self, method: str, params: Optional[list] = None) -> Any:
        ...


class Transport(enum.Enum):
    # Sign locally, send raw transactions through the RPC node
    LOCAL_ACCOUNT = "local_account"
    # A connected wallet holds the keys and submits transactions
    WALLET = "wallet"
    # Bare RPC node; accounts are whatever the node manages
    RPC = "rpc"


def select_transport(
    signer: Optional[LocalAccount],
    wallet: Optional[WalletProvider],
) -> Transport:
    if signer is not None:
        return Transport.LOCAL_ACCOUNT
    if wallet is not None:
        return Transport.WALLET
    return Transport.RPC
